"""Render the Jinja2 templates shipped in a package's templates subpackage."""

import importlib.resources

import jinja2


def _environment() -> jinja2.Environment:
    # Config files are plain text: no escaping, block tags own their line.
    return jinja2.Environment(
        autoescape=False,
        trim_blocks=True,
        keep_trailing_newline=True,
        undefined=jinja2.StrictUndefined,
    )


def render_template(template_name: str, *, package: str, **kwargs) -> str:
    """Render templates/<template_name> from package with the given variables.

    Raises:
        jinja2.UndefinedError: The template uses a variable not passed in kwargs.
    """
    templates = importlib.resources.files(f"{package}.templates")
    source = templates.joinpath(template_name).read_text(encoding="utf-8")
    return _environment().from_string(source).render(**kwargs)
