"""Code panel: the numbered source lines shown beside the timelines."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from lifetimeviz.model import ExternalEvent
from lifetimeviz.timeline_layout import LINE_SPACE
from lifetimeviz.utils import render_template

CODE_LINE_TEMPLATE = (
    '        <text class="code" x="{{X_VAL}}" y="{{Y_VAL}}"> {{LINE}} </text>\n'
)

_X = 20
_FIRST_Y = 90


def render_code_panel(
    annotated_lines: Iterable[str],
    lines: Iterable[str],
    event_line_map: Mapping[int, Sequence[ExternalEvent]],
) -> tuple[str, int, int]:
    """Render the code panel.

    Lines that carry several arrows get extra empty numbered lines below
    them. Returns the SVG fragment, the next unused line number and the
    byte length of the longest plain source line.
    """
    max_x_space = max((len(line.encode("utf-8")) for line in lines), default=0)

    y = _FIRST_Y
    parts = ['    <g id="code">\n']
    line_of_code = 1
    for line in annotated_lines:
        parts.append(
            render_template(
                CODE_LINE_TEMPLATE,
                {
                    "X_VAL": _X,
                    "Y_VAL": y,
                    "LINE": f'<tspan fill="#AAA">{line_of_code}  </tspan>{line}',
                },
            )
        )
        y += LINE_SPACE

        # One arrow fits on the line itself; each further one gets a blank line.
        for _ in range(len(event_line_map.get(line_of_code, ())) - 1):
            line_of_code += 1
            parts.append(
                render_template(
                    CODE_LINE_TEMPLATE,
                    {
                        "X_VAL": _X,
                        "Y_VAL": y,
                        "LINE": f'<tspan fill="#AAA">{line_of_code}</tspan>',
                    },
                )
            )
            y += LINE_SPACE
        line_of_code += 1
    parts.append("    </g>\n")
    return "".join(parts), line_of_code, max_x_space