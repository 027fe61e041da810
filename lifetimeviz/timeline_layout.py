"""Column layout of the timeline panel, and its labels and event dots."""

from __future__ import annotations

from dataclasses import dataclass, field

from lifetimeviz.model import EventKind, Function
from lifetimeviz.utils import render_template
from lifetimeviz.visualization import StructsInfo, VisualizationData

LINE_SPACE = 30

SPAN_BEGIN = (
    "&lt;span style=&quot;font-family: 'Source Code Pro', Consolas, 'Ubuntu Mono', "
    "Menlo, 'DejaVu Sans Mono', monospace, monospace !important;&quot;&gt;"
)
SPAN_END = "&lt;/span&gt;"

NON_STRUCT_KEY = -1

LABEL_TEMPLATE = (
    '        <text x="{{x_val}}" y="70" style="text-anchor:middle" '
    'data-hash="{{hash}}" class="label tooltip-trigger" '
    'data-tooltip-text="{{title}}">{{name}}</text>\n'
)
DOT_TEMPLATE = (
    '        <circle cx="{{dot_x}}" cy="{{dot_y}}" r="5" data-hash="{{hash}}" '
    'class="tooltip-trigger" data-tooltip-text="{{title}}"/>\n'
)
FUNCTION_DOT_TEMPLATE = (
    '        <use xlink:href="#functionDot" data-hash="{{hash}}" x="{{x}}" y="{{y}}" '
    'class="tooltip-trigger" data-tooltip-text="{{title}}"/>\n'
)
FUNCTION_LOGO_TEMPLATE = (
    '        <text x="{{x}}" y="{{y}}" data-hash="{{hash}}" '
    'class="functionLogo tooltip-trigger fn-trigger" '
    'data-tooltip-text="{{title}}">f</text>\n'
)


@dataclass
class TimelineColumnData:
    """Where and how one resource access point's column is drawn."""

    name: str
    x_val: int
    title: str
    is_ref: bool
    is_struct_group: bool
    is_member: bool
    owner: int


@dataclass
class PanelData:
    """SVG fragments accumulated for one part of the timeline panel."""

    labels: str = ""
    dots: str = ""
    timelines: str = ""
    ref_line: str = ""
    arrows: str = ""


Panels = dict[int, tuple[PanelData, PanelData]]


def styled(name: str) -> str:
    """Wrap a name in the escaped monospace span used in tooltips."""
    return SPAN_BEGIN + name + SPAN_END


def get_y_axis_pos(line_number: int) -> int:
    """Vertical pixel position of a source line."""
    return 85 - LINE_SPACE + LINE_SPACE * line_number


def panel_for(panels: Panels, column: TimelineColumnData) -> PanelData:
    """Panel a column draws into: its struct's instance or member panel, or the
    non-struct panel. Missing entries are created."""
    key = column.owner if column.is_struct_group else NON_STRUCT_KEY
    pair = panels.setdefault(key, (PanelData(), PanelData()))
    return pair[1] if column.is_struct_group and column.is_member else pair[0]


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


def compute_column_layout(
    visualization_data: VisualizationData, structs_info: StructsInfo
) -> tuple[dict[int, TimelineColumnData], int]:
    """Lay out a column for every non-function timeline, in hash order.

    Struct boxes found along the way are appended to ``structs_info``.
    Returns the layout and the panel width.
    """
    layout: dict[int, TimelineColumnData] = {}
    x = 0
    owner: int | None = None
    owner_x = 0
    last_x = 0
    for key in sorted(visualization_data.timelines):
        rap = visualization_data.timelines[key].resource_access_point
        if isinstance(rap, Function):
            continue
        name = rap.name
        if rap.is_ref():
            temp_name = name + "|*" + name
            x += max(90, (_byte_len(temp_name) - 1) * 7)
        else:
            x += max(70, (_byte_len(name) - 1) * 13)
        mutability = "mutable" if visualization_data.is_mut(key) else "immutable"

        if owner is None and rap.is_struct_group() and not rap.is_member():
            owner = rap.hash
            owner_x = x
        elif owner is not None and rap.is_struct_group() and rap.is_member():
            last_x = x
        elif owner is not None and not rap.is_struct_group():
            structs_info.structs.append((owner, owner_x, last_x))
            owner = None
            owner_x = 0
            last_x = 0

        layout[key] = TimelineColumnData(
            name=name,
            x_val=x,
            title=f"{styled(name)}, {mutability}",
            is_ref=rap.is_ref(),
            is_struct_group=rap.is_struct_group(),
            is_member=rap.is_member(),
            owner=rap.owner_hash(),
        )
    return layout, x + 100


def render_labels(panels: Panels, layout: dict[int, TimelineColumnData]) -> None:
    """Draw the name label at the top of every column."""
    for key in sorted(layout):
        column = layout[key]
        name = column.name
        if column.is_ref:
            name = f'{column.name}<tspan stroke="none">|</tspan>*{column.name}'
        panel_for(panels, column).labels += render_template(
            LABEL_TEMPLATE,
            {"x_val": column.x_val, "hash": key, "name": name, "title": column.title},
        )


def render_dots(
    panels: Panels,
    visualization_data: VisualizationData,
    layout: dict[int, TimelineColumnData],
) -> None:
    """Draw a dot for every event on every non-function timeline."""
    for key in sorted(visualization_data.timelines):
        timeline = visualization_data.timelines[key]
        if isinstance(timeline.resource_access_point, Function):
            continue
        column = layout[key]
        name = visualization_data.get_name_from_hash(key)
        holds_resource = False
        for line_number, event in timeline.history:
            if event.kind in (EventKind.ACQUIRE, EventKind.COPY):
                holds_resource = True
            elif event.kind is EventKind.MOVE:
                holds_resource = False

            if name is None:
                title = "Unknown Resource Owner Value"
            else:
                title = event.print_message_with_name(name)
                if event.kind is EventKind.OWNER_GO_OUT_OF_SCOPE:
                    title += (
                        ". Its resource is dropped."
                        if holds_resource
                        else ". No resource is dropped."
                    )
            panel_for(panels, column).dots += render_template(
                DOT_TEMPLATE,
                {
                    "hash": key,
                    "dot_x": column.x_val,
                    "dot_y": get_y_axis_pos(line_number),
                    "title": title,
                },
            )