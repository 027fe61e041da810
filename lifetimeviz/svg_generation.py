"""Produce the code and timeline SVG files for one visualization."""

from __future__ import annotations

import os

from lifetimeviz.code_panel import render_code_panel
from lifetimeviz.model import ExternalEvent
from lifetimeviz.timeline_layout import LINE_SPACE
from lifetimeviz.timeline_panel import render_timeline_panel
from lifetimeviz.utils import (
    create_and_write_to_file,
    read_file_to_string,
    read_lines,
    render_template,
)
from lifetimeviz.visualization import VisualizationData

DEFAULT_TEMPLATE_DIR = "svg_generator/templates/"
CODE_SVG_NAME = "vis_code.svg here"
TIMELINE_SVG_NAME = "vis_timeline.svg"


def _sort_key(event: ExternalEvent) -> tuple[int, int]:
    source, target = event.endpoints()
    return target.hash, source.hash


def _extra_lines_before(
    event_line_map: dict[int, list[ExternalEvent]], line_number: int
) -> int:
    extra = 0
    for info_line in sorted(event_line_map):
        if info_line >= line_number:
            break
        extra += len(event_line_map[info_line]) - 1
    return extra


def _shift_event_lines(visualization_data: VisualizationData) -> None:
    for events in visualization_data.event_line_map.values():
        events.sort(key=_sort_key)

    for line_number, event in list(visualization_data.preprocess_external_events):
        extra = _extra_lines_before(visualization_data.event_line_map, line_number)
        visualization_data.append_processed_external_event(event, line_number + extra)

    shifted: dict[int, list[ExternalEvent]] = {}
    extra_sum = 0
    for line_number in sorted(visualization_data.event_line_map):
        events = visualization_data.event_line_map[line_number]
        shifted[line_number + extra_sum] = list(events)
        extra_sum += len(events) - 1
    visualization_data.event_line_map = shifted


def render_svg(
    input_path: str | os.PathLike[str],
    output_path: str | os.PathLike[str],
    visualization_data: VisualizationData,
    template_dir: str | os.PathLike[str] = DEFAULT_TEMPLATE_DIR,
) -> tuple[str, str]:
    """Render and write the code and timeline SVGs; return the two file paths.

    Paths are joined by plain concatenation, so directories should end in a
    separator. ``visualization_data`` is updated with the processed events.
    """
    input_path = os.fspath(input_path)
    output_path = os.fspath(output_path)
    template_dir = os.fspath(template_dir)

    _shift_event_lines(visualization_data)

    code_image_path = output_path + CODE_SVG_NAME
    timeline_image_path = output_path + TIMELINE_SVG_NAME

    code_template = read_file_to_string(template_dir + "code_template.svg")
    timeline_template = read_file_to_string(template_dir + "timeline_template.svg")
    css = read_file_to_string(template_dir + "book_svg_style.css")

    code_panel = ""
    num_lines = 0
    try:
        annotated_lines = read_lines(input_path + "annotated_source.rs")
        lines = read_lines(input_path + "source.rs")
    except OSError:
        pass
    else:
        code_panel, num_lines, _ = render_code_panel(
            annotated_lines, lines, visualization_data.event_line_map
        )

    diagram, max_width = render_timeline_panel(visualization_data)

    svg_data = {
        "visualization_name": input_path,
        "css": css,
        "code": code_panel,
        "diagram": diagram,
        "tl_id": "tl_" + input_path,
        "tl_width": max(max_width, 200),
        "height": num_lines * LINE_SPACE + 80 + 50,
    }

    create_and_write_to_file(render_template(code_template, svg_data), code_image_path)
    create_and_write_to_file(
        render_template(timeline_template, svg_data), timeline_image_path
    )
    return code_image_path, timeline_image_path