"""Timeline panel: state lines, reference lines, arrows, struct boxes and assembly."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, replace
from typing import Optional

from lifetimeviz.line_styles import OwnerLine
from lifetimeviz.model import (
    ExternalEventKind,
    Function,
    MutRef,
    ResourceAccessPoint,
    State,
    StateKind,
    StaticRef,
    VisualizationError,
)
from lifetimeviz.timeline_layout import (
    LINE_SPACE,
    NON_STRUCT_KEY,
    PanelData,
    Panels,
    TimelineColumnData,
    compute_column_layout,
    get_y_axis_pos,
    panel_for,
    render_dots,
    render_labels,
    styled,
)
from lifetimeviz.utils import render_template
from lifetimeviz.visualization import StructsInfo, VisualizationData

TIMELINE_PANEL_TEMPLATE = (
    '    <g id="labels">\n{{ labels }}    </g>\n\n    '
    '<g id="timelines">\n{{ timelines }}    </g>\n\n    '
    '<g id="ref_line">\n{{ ref_line }}    </g>\n\n    '
    '<g id="events">\n{{ dots }}    </g>\n\n    '
    '<g id="arrows">\n{{ arrows }}    </g>'
)
STRUCT_TEMPLATE = (
    '    <g id="{{struct_name}}">\n'
    '\t<g class="struct_instance">\n{{ struct_instance }}</g>\n'
    '\t<g class="struct_members">\n{{ struct_members }}</g>\n'
    "\t</g>\n    "
)
ARROW_TEMPLATE = (
    '        <polyline stroke-width="5px" stroke="gray" points="{{coordinates_hbs}}" '
    'marker-end="url(#arrowHead)" class="tooltip-trigger" '
    'data-tooltip-text="{{title}}" style="fill: none;"/> \n'
)
VERTICAL_LINE_TEMPLATE = (
    '        <line data-hash="{{hash}}" class="{{line_class}} tooltip-trigger" '
    'x1="{{x1}}" x2="{{x2}}" y1="{{y1}}" y2="{{y2}}" data-tooltip-text="{{title}}"/>\n'
)
HOLLOW_LINE_TEMPLATE = (
    '        <path data-hash="{{hash}}" class="hollow tooltip-trigger" '
    'style="fill:transparent;" d="M {{x1}},{{y1}} V {{y2}} h 3.5 V {{y1}} h -3.5" '
    'data-tooltip-text="{{title}}"/>\n'
)
SOLID_REF_LINE_TEMPLATE = (
    '        <path data-hash="{{hash}}" class="mutref {{line_class}} tooltip-trigger" '
    'style="fill:transparent; stroke-width: 2px !important;" '
    'd="M {{x1}} {{y1}} l {{dx}} {{dy}} v {{v}} l -{{dx}} {{dy}}" '
    'data-tooltip-text="{{title}}"/>\n'
)
HOLLOW_REF_LINE_TEMPLATE = (
    '        <path data-hash="{{hash}}" class="staticref tooltip-trigger" '
    'style="fill: transparent;" stroke-width="2px" stroke-dasharray="3" '
    'd="M {{x1}} {{y1}} l {{dx}} {{dy}} v {{v}} l -{{dx}} {{dy}}" '
    'data-tooltip-text="{{title}}"/>\n'
)
BOX_TEMPLATE = (
    '        <rect id="{{name}}" x="{{x}}" y="{{y}}" rx="20" ry="20" width="{{w}}" '
    'height="{{h}}" style="fill:white;stroke:black;stroke-width:3;opacity:0.1" '
    'pointer-events="none" />\n'
)

_ARROW_LENGTH = 20

_ARROW_TITLES = {
    ExternalEventKind.BIND: "Bind",
    ExternalEventKind.COPY: "Copy",
    ExternalEventKind.MOVE: "Move",
    ExternalEventKind.STATIC_BORROW: "Immutable borrow",
    ExternalEventKind.STATIC_DIE: "Return immutably borrowed resource",
    ExternalEventKind.MUTABLE_BORROW: "Mutable borrow",
    ExternalEventKind.MUTABLE_DIE: "Return mutably borrowed resource",
    ExternalEventKind.PASS_BY_MUTABLE_REFERENCE: "Pass by mutable reference",
    ExternalEventKind.PASS_BY_STATIC_REFERENCE: "Pass by immutable reference",
}


@dataclass
class VerticalLineData:
    """Values for one vertical state line of a timeline."""

    line_class: str
    hash: int
    x1: float
    x2: int
    y1: int
    y2: int
    title: str


@dataclass
class _RefLineData:
    line_class: str = ""
    hash: int = 0
    x1: int = 0
    x2: int = 0
    y1: int = 0
    y2: int = 0
    dx: int = 15
    dy: int = 0
    v: int = 0
    title: str = ""


def _non_struct(panels: Panels) -> PanelData:
    return panels.setdefault(NON_STRUCT_KEY, (PanelData(), PanelData()))[0]


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


def _fmt_coord(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _signed(key: int) -> int:
    return key - (1 << 64) if key >= (1 << 63) else key


def determine_owner_line_styles(rap: ResourceAccessPoint, state: State) -> OwnerLine:
    """Line style of an owner in the given state."""
    if state.kind is StateKind.FULL_PRIVILEGE:
        return OwnerLine.SOLID if rap.is_mut else OwnerLine.HOLLOW
    if state.kind is StateKind.PARTIAL_PRIVILEGE:
        return OwnerLine.HOLLOW
    return OwnerLine.EMPTY


def create_owner_line_string(
    rap: ResourceAccessPoint, state: State, data: VerticalLineData
) -> str:
    """SVG for an owner's state line; empty where nothing is drawn."""
    if state.kind not in (StateKind.FULL_PRIVILEGE, StateKind.PARTIAL_PRIVILEGE):
        return ""
    style = determine_owner_line_styles(rap, state)
    if style is OwnerLine.SOLID:
        data.line_class = "solid"
        data.title += ". The binding can be reassigned."
        return render_template(VERTICAL_LINE_TEMPLATE, asdict(data))
    if style is OwnerLine.HOLLOW:
        hollow = replace(
            data,
            title=data.title + ". The binding cannot be reassigned.",
            x1=data.x1 - 1.8,
        )
        return render_template(HOLLOW_LINE_TEMPLATE, asdict(hollow))
    return ""


def create_reference_line_string(
    rap: ResourceAccessPoint, state: State, data: VerticalLineData
) -> str:
    """SVG for a reference's state line; empty where nothing is drawn."""
    kind = state.kind
    if kind is StateKind.FULL_PRIVILEGE and rap.is_mut:
        data.line_class = "solid"
        if rap.is_ref():
            data.title += "; can read and write data; can point to another piece of data."
        else:
            data.title += "; can read and write data"
        return render_template(VERTICAL_LINE_TEMPLATE, asdict(data))
    if kind is StateKind.FULL_PRIVILEGE:
        if rap.is_ref():
            data.title += (
                "; can read and write data; cannot point to another piece of data."
            )
        else:
            data.title += "; can only read data"
        hollow = replace(data, x1=data.x1 - 1.8)
        return render_template(HOLLOW_LINE_TEMPLATE, asdict(hollow))
    if kind is StateKind.PARTIAL_PRIVILEGE:
        data.line_class = "solid"
        data.title += "; can only read data."
        hollow = replace(data, x1=data.x1 - 1.8)
        return render_template(HOLLOW_LINE_TEMPLATE, asdict(hollow))
    if kind is StateKind.RESOURCE_MOVED and rap.is_mut:
        data.line_class = "extend"
        data.title += "; cannot access data."
        return render_template(VERTICAL_LINE_TEMPLATE, asdict(data))
    return ""


def render_timelines(
    panels: Panels,
    visualization_data: VisualizationData,
    layout: dict[int, TimelineColumnData],
) -> None:
    """Draw the vertical state lines of every non-function timeline."""
    for key in sorted(visualization_data.timelines):
        rap = visualization_data.timelines[key].resource_access_point
        if isinstance(rap, Function):
            continue
        column = layout[key]
        for line_start, line_end, state in visualization_data.get_states(key):
            data = VerticalLineData(
                line_class="",
                hash=key,
                x1=float(column.x_val),
                x2=column.x_val,
                y1=get_y_axis_pos(line_start),
                y2=get_y_axis_pos(line_end),
                title=state.print_message_with_name(rap.name),
            )
            if isinstance(rap, (MutRef, StaticRef)):
                _non_struct(panels).timelines += create_reference_line_string(
                    rap, state, data
                )
            else:
                panel_for(panels, column).timelines += create_owner_line_string(
                    rap, state, data
                )


def render_ref_line(
    panels: Panels,
    visualization_data: VisualizationData,
    layout: dict[int, TimelineColumnData],
) -> None:
    """Draw the bracket beside a reference showing whether it can mutate its data."""
    for key in sorted(visualization_data.timelines):
        rap = visualization_data.timelines[key].resource_access_point
        if isinstance(rap, Function):
            continue
        alive = False
        data = _RefLineData()
        for line_start, _line_end, state in visualization_data.get_states(key):
            kind = state.kind
            if kind in (StateKind.OUT_OF_SCOPE, StateKind.RESOURCE_MOVED):
                if not alive:
                    continue
                data.x2 = data.x1
                data.y2 = get_y_axis_pos(line_start)
                dv = get_y_axis_pos(line_start) - data.y1
                data.v = dv - _trunc_div(2 * dv, 5)
                data.dy = _trunc_div(dv, 5)
                if isinstance(rap, MutRef):
                    _non_struct(panels).ref_line += render_template(
                        SOLID_REF_LINE_TEMPLATE, asdict(data)
                    )
                elif isinstance(rap, StaticRef):
                    _non_struct(panels).ref_line += render_template(
                        HOLLOW_REF_LINE_TEMPLATE, asdict(data)
                    )
                alive = False
            elif kind in (StateKind.FULL_PRIVILEGE, StateKind.PARTIAL_PRIVILEGE):
                if alive:
                    continue
                data.hash = key
                data.x1 = layout[key].x_val
                data.y1 = get_y_axis_pos(line_start)
                verb = "can" if kind is StateKind.FULL_PRIVILEGE else "cannot"
                data.title = (
                    f"{verb} mutate *{visualization_data.get_name_from_hash(key)}"
                )
                data.line_class = "solid"
                alive = True


def _arrow_order(
    visualization_data: VisualizationData, line_number: int, event
) -> int:
    events = visualization_data.event_line_map.get(line_number)
    if events is None or event not in events:
        raise VisualizationError(
            f"no arrow position recorded for the event on line {line_number}"
        )
    return events.index(event)


def _shorten_head(coordinates: list[list[float]]) -> None:
    first, last = coordinates[0], coordinates[-1]
    if len(coordinates) == 2:
        first[0] += 10.0 if first[0] < last[0] else -10.0
        return
    second = coordinates[1]
    if first[0] < last[0]:
        dx = second[0] - first[0]
        dy = second[1] - first[1]
        hypotenuse = math.sqrt(dx**2 + dy**2)
        first[0] += dx / hypotenuse * 10.0
        first[1] += dy / hypotenuse * 10.0
    else:
        dx = first[0] - second[0]
        dy = second[1] - first[1]
        hypotenuse = math.sqrt(dx**2 + dy**2)
        first[0] -= dx / hypotenuse * 10.0
        first[1] += dy / hypotenuse * 10.0


def render_arrows(
    panels: Panels,
    visualization_data: VisualizationData,
    layout: dict[int, TimelineColumnData],
) -> None:
    """Draw arrows, function logos and function dots for the recorded events."""
    for line_number, external_event in visualization_data.external_events:
        title = _ARROW_TITLES.get(external_event.kind, "")
        source, target = external_event.endpoints()
        if source is not None:
            title = f"{title} from {styled(source.name)}"
        if target is not None:
            title = f"{title} to {styled(target.name)}"

        coordinates: list[list[float]] = []
        y = get_y_axis_pos(line_number)

        if source is None or target is None:
            pass
        elif isinstance(source, Function) and isinstance(target, Function):
            pass
        elif isinstance(source, Function):
            column = layout[target.hash]
            x1 = column.x_val + 3
            x2 = x1 + _ARROW_LENGTH
            coordinates = [[float(x1), float(y)], [float(x2), float(y)]]
            logo = {
                "x": x2 + 3,
                "y": y + 5,
                "hash": source.hash,
                "title": styled(source.name),
            }
            panel_for(panels, column).dots += render_template(
                FUNCTION_LOGO_TEMPLATE, logo
            )
        elif isinstance(target, Function) and external_event.kind in (
            ExternalEventKind.PASS_BY_STATIC_REFERENCE,
            ExternalEventKind.PASS_BY_MUTABLE_REFERENCE,
        ):
            column = layout[source.hash]
            action = (
                " reads from "
                if external_event.kind is ExternalEventKind.PASS_BY_STATIC_REFERENCE
                else " reads from/writes to "
            )
            dot = {
                "x": column.x_val,
                "y": y,
                "title": styled(target.name) + action + styled(source.name),
                "hash": source.hash,
            }
            panel_for(panels, column).dots += render_template(
                FUNCTION_DOT_TEMPLATE, dot
            )
        elif isinstance(target, Function):
            column = layout[source.hash]
            x2 = column.x_val - 5
            x1 = x2 - _ARROW_LENGTH
            coordinates = [[float(x1), float(y)], [float(x2), float(y)]]
            logo = {
                "x": x1 - 10,
                "y": y + 5,
                "hash": target.hash,
                "title": styled(target.name),
            }
            panel_for(panels, column).dots += render_template(
                FUNCTION_LOGO_TEMPLATE, logo
            )
        else:
            order = _arrow_order(visualization_data, line_number, external_event)
            x1 = layout[target.hash].x_val
            x2 = layout[source.hash].x_val
            if order > 0:
                offset = 20 if x2 <= x1 else -20
                x3 = x2 + offset
                x4 = x1 - offset
                y_low = y + LINE_SPACE * order
                coordinates = [
                    [float(x1), float(y)],
                    [float(x4), float(y_low)],
                    [float(x3), float(y_low)],
                    [float(x2), float(y)],
                ]
            else:
                coordinates = [[float(x1), float(y)], [float(x2), float(y)]]

        if not coordinates or source is None:
            continue
        _shorten_head(coordinates)
        points = "".join(
            f"{_fmt_coord(px)} {_fmt_coord(py)} " for px, py in reversed(coordinates)
        )
        arrow = render_template(
            ARROW_TEMPLATE, {"coordinates_hbs": points, "title": title}
        )
        column = layout.get(source.hash)
        panel = panel_for(panels, column) if column is not None else _non_struct(panels)
        panel.arrows += arrow


# Imported late to keep the template list above in one place.
from lifetimeviz.timeline_layout import (  # noqa: E402
    FUNCTION_DOT_TEMPLATE,
    FUNCTION_LOGO_TEMPLATE,
)


def render_struct_box(panels: Panels, structs_info: StructsInfo) -> None:
    """Draw a box around each struct's columns."""
    for owner, owner_x, last_x in structs_info.structs:
        box = {
            "name": owner,
            "x": owner_x - 20,
            "y": 50,
            "w": last_x - owner_x + 60,
            "h": 30,
        }
        pair = panels.setdefault(owner, (PanelData(), PanelData()))
        pair[1].arrows += render_template(BOX_TEMPLATE, box)


def render_timeline_panel(visualization_data: VisualizationData) -> tuple[str, int]:
    """Render the whole timeline panel; return the SVG fragment and its width."""
    structs_info = StructsInfo()
    layout, width = compute_column_layout(visualization_data, structs_info)
    panels: Panels = {NON_STRUCT_KEY: (PanelData(), PanelData())}

    render_timelines(panels, visualization_data, layout)
    render_labels(panels, layout)
    render_dots(panels, visualization_data, layout)
    render_ref_line(panels, visualization_data, layout)
    render_arrows(panels, visualization_data, layout)
    render_struct_box(panels, structs_info)

    parts = []
    for key in sorted(panels, key=_signed):
        instance, members = panels[key]
        if key == NON_STRUCT_KEY:
            struct_name: Optional[str] = "non-struct"
        else:
            struct_name = visualization_data.get_name_from_hash(key)
            if struct_name is None:
                raise VisualizationError(f"no matching resource owner for hash {key}")
        parts.append(
            render_template(
                STRUCT_TEMPLATE,
                {
                    "struct_name": struct_name,
                    "struct_instance": render_template(
                        TIMELINE_PANEL_TEMPLATE, asdict(instance)
                    ),
                    "struct_members": render_template(
                        TIMELINE_PANEL_TEMPLATE, asdict(members)
                    ),
                },
            )
        )
    return "".join(parts), width