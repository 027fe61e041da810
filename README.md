# lifetimeviz

lifetimeviz draws the life of every variable in a short program as a pair of
SVG images. One image is a numbered listing of the source. The other is a
timeline panel in which each variable has a column and a vertical line. Dots
on the line mark events such as acquiring, moving, lending, borrowing and
going out of scope. Arrows show a resource passing from one variable to
another, or to and from a function. Every line, dot and arrow carries a
hover text that explains what happens at that point.

The package uses only the standard library.

## Example

```python
from lifetimeviz.model import ExternalEvent, ExternalEventKind, Function, Owner
from lifetimeviz.svg_generation import render_svg
from lifetimeviz.visualization import VisualizationData

s = Owner("s", 1)
from_fn = Function("String::from", 5)

data = VisualizationData()
data.append_external_event(
    ExternalEvent(ExternalEventKind.MOVE, source=from_fn, target=s), 1
)
data.append_external_event(ExternalEvent(ExternalEventKind.GO_OUT_OF_SCOPE, subject=s), 3)

code_svg, timeline_svg = render_svg("examples/hello/", "out/", data, "templates/")
```

## How it fits together

- `lifetimeviz.model` describes what is drawn. The resource access points
  are the frozen dataclasses `Owner`, `Struct`, `MutRef`, `StaticRef` and
  `Function`, each with a `name` and a `hash` that identifies it. An
  `ExternalEvent` is what you record about a source line. Its `kind` is an
  `ExternalEventKind` (`BIND`, `COPY`, `MOVE`, `STATIC_BORROW`,
  `MUTABLE_BORROW`, `STATIC_DIE`, `MUTABLE_DIE`,
  `PASS_BY_STATIC_REFERENCE`, `PASS_BY_MUTABLE_REFERENCE`,
  `GO_OUT_OF_SCOPE`, `INIT_REF_PARAM`). Transfer kinds take `source` and
  `target`. `GO_OUT_OF_SCOPE` and `INIT_REF_PARAM` take `subject`. `Event`
  and `State` are the per-variable view derived from those records, and
  both have `print_message_with_name(name)` for their hover text.
- `lifetimeviz.visualization.VisualizationData` collects the events.
  - `append_external_event(event, line_number)` records an event as it
    appears in the source. It also notes which lines carry several arrows
    between variables.
  - `append_processed_external_event(event, line_number)` adds an event to
    the per-variable `Timeline`s. `render_svg` calls it for you once line
    numbers have been shifted. You can also call it directly if you only
    want the states.
  - `get_states(key)` returns `(start line, end line, State)` spans for the
    variable with that hash. In each span the variable holds full, partial
    or revoked privilege, has had its resource moved away, or is out of
    scope.
  - A sequence of events that cannot happen raises `VisualizationError`.
    Examples are an immutable variable reacquiring a resource, or a function
    going out of scope.
- `lifetimeviz.timeline_layout` places the columns and draws labels and
  event dots.
- `lifetimeviz.timeline_panel.render_timeline_panel(visualization_data)`
  returns the diagram fragment and its width.
- `lifetimeviz.code_panel.render_code_panel(annotated_lines, lines,
  event_line_map)` returns the listing fragment, the next unused line number
  and the byte length of the longest plain line.
- `lifetimeviz.svg_generation.render_svg(input_path, output_path,
  visualization_data, template_dir)` does the whole job and returns the two
  paths it wrote.
  - It reads `annotated_source.rs` and `source.rs` from `input_path`.
  - It reads `code_template.svg`, `timeline_template.svg` and
    `book_svg_style.css` from `template_dir`, which defaults to
    `svg_generator/templates/`.
  - It writes the files `CODE_SVG_NAME` and `TIMELINE_SVG_NAME` under
    `output_path`.
  - Paths are joined by plain string concatenation, so directories should
    end in a separator.
  - A template file that cannot be read counts as empty. Missing source
    files leave the listing empty.
- Templates use `{{ name }}` placeholders, which `lifetimeviz.utils.render_template`
  fills in without escaping. The SVG templates receive
  `visualization_name`, `css`, `code`, `diagram`, `tl_id`, `tl_width` and
  `height`.

## Layout rules worth knowing

- When several arrows between variables fall on the same source line, they
  are spread over extra blank numbered lines so that they do not overlap.
  The line numbers of later events shift to match.
- Struct members are grouped under their owning struct, and a light box is
  drawn around them.
- Reference columns are labelled `r|*r` to show both the reference and the
  data it points to. A bracket beside the column shows whether the
  reference can mutate that data.

## Hover texts

`lifetimeviz.hover_messages` holds every tooltip text, for example
`state_full_privilege` and `event_dot_move_to`. Names in these texts are
wrapped in an escaped `<span>` that uses a monospace font, so they appear as
code in the rendered tooltip.

## What the package does not do

- It does not analyse source code. The events for each line must be
  recorded by the caller.
- It ships no SVG templates or stylesheet. You supply them in
  `template_dir`.
- It has no command-line tool. Use it from Python.
- `VisualizationData.get_state(key, line_number)` does not look anything up
  by line yet. It returns an out-of-scope state for any known hash and
  `None` otherwise.