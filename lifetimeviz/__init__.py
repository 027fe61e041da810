"""SVG timelines of ownership, borrowing and lifetimes of program variables."""

__version__ = "0.1.0"

__all__ = [
    "code_panel",
    "hover_messages",
    "line_styles",
    "model",
    "svg_generation",
    "timeline_layout",
    "timeline_panel",
    "utils",
    "visualization",
]