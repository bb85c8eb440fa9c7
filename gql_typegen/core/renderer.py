"""Rendering of generated classes with Jinja2 templates.

Supports custom templates via the template_dir parameter:
    renderer = ClassRenderer(template_dir="./my_templates")

Template lookup order:
1. User's template directory (if provided)
2. Package default templates

Available templates to override:
    - module.py.j2: Module header and class layout
    - root_class.py.j2: Operation result classes
    - leaf_class.py.j2: Selection result classes
    - input_class.py.j2: Input object classes
    - enum_class.py.j2: Enum classes
    - package_init.py.j2: ``__init__.py`` written in split mode
"""

import ast
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from .errors import GenerationError
from .expressions import render_statements
from .ir import DefinedClass, EnumClass, FieldAccessMethod, InputClass, LeafClass, RootClass
from .naming import module_name, safe_param_name

TEMPLATES = {
    RootClass: "root_class.py.j2",
    LeafClass: "leaf_class.py.j2",
    InputClass: "input_class.py.j2",
    EnumClass: "enum_class.py.j2",
}


def pystr(text: str) -> str:
    """Render text as a Python string literal.

    Multi-line text is emitted triple-quoted when that needs no escaping.
    """
    if (
        "\n" in text
        and '"""' not in text
        and "\\" not in text
        and not text.endswith('"')
        and all(ch.isprintable() or ch == "\n" for ch in text)
    ):
        return f'"""{text}"""'
    return json.dumps(text, ensure_ascii=False)


def typename_set(typenames: Iterable[str]) -> str:
    """Render a set literal of type names."""
    return "{" + ", ".join(json.dumps(name) for name in typenames) + "}"


def optional(signature: str) -> str:
    if signature.startswith("Optional["):
        return signature
    return f"Optional[{signature}]"


@dataclass
class MethodView:
    """A field accessor as the templates see it."""
    name: str
    signature: str
    body: list[str]


def method_view(owner: str, possible_types: tuple[str, ...], method: FieldAccessMethod) -> MethodView:
    """Lay out an accessor, dispatching on ``__typename`` between its paths.

    Paths are tried in order and the first one matching the runtime type
    wins. A path that matches every type not handled yet is emitted without
    a check. Possible types no path covers read as ``None``; a type outside
    the schema's possible types raises ``UnexpectedTypenameError``.
    """
    remaining = list(possible_types)
    signatures: list[str] = []
    body: list[str] = []

    for path in method.field_access_paths:
        applicable = [name for name in remaining if name in path.typenames]
        if not applicable:
            continue
        if path.signature not in signatures:
            signatures.append(path.signature)

        statements = render_statements(path.expression)
        if len(applicable) == len(remaining):
            body.extend(statements)
            remaining = []
            break

        body.append(f"if self.typename in {typename_set(applicable)}:")
        body.extend(f"    {line}" for line in statements)
        remaining = [name for name in remaining if name not in applicable]

    if not signatures:
        signature = "None"
    elif len(signatures) == 1:
        signature = signatures[0]
    else:
        signature = f"Union[{', '.join(signatures)}]"

    if remaining:
        if signatures:
            signature = optional(signature)
        body.append(f"if self.typename in {typename_set(remaining)}:")
        body.append("    return None")
        body.append(f"raise UnexpectedTypenameError({json.dumps(owner)}, self.typename)")
    elif not body:
        # Abstract type without implementations
        body.append("return None")

    return MethodView(method.name, signature, body)


class ClassRenderer:
    """Renders class records into Python source.

    Templates in template_dir take precedence over built-in templates.

    Example:
        renderer = ClassRenderer(template_dir="./my_templates")
        code = renderer.render_module(classes, imports=set())
    """

    def __init__(self, template_dir: Optional[str] = None):
        """Initialize the renderer.

        Args:
            template_dir: Optional directory with custom Jinja2 templates.
                          Templates here override the built-in templates.
        """
        self.template_dir = template_dir

        # Build template loader - custom templates take precedence
        loaders = []
        if template_dir:
            template_path = Path(template_dir)
            if template_path.is_dir():
                loaders.append(FileSystemLoader(str(template_path)))
        loaders.append(PackageLoader("gql_typegen", "templates"))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        # Register custom filters
        self.env.filters["pystr"] = pystr
        self.env.filters["module_name"] = module_name
        self.env.filters["safe_member"] = safe_param_name

    def render_class(self, defined_class: DefinedClass) -> str:
        """Render the source of one class."""
        template = self.env.get_template(TEMPLATES[type(defined_class)])
        context = {"cls": defined_class}
        if isinstance(defined_class, (RootClass, LeafClass)):
            context["methods"] = [
                method_view(defined_class.name, defined_class.possible_types, method)
                for method in defined_class.defined_methods
            ]
        return template.render(context).rstrip() + "\n"

    def render_module(
        self,
        classes: Iterable[DefinedClass],
        imports: Iterable[str] = (),
        local_imports: Iterable[str] = (),
        filename: str = "<generated>",
    ) -> str:
        """Render a module holding classes, in the given order."""
        template = self.env.get_template("module.py.j2")
        content = template.render(
            class_sources=[self.render_class(c).rstrip() for c in classes],
            imports=sorted(imports),
            local_imports=sorted(local_imports),
        )
        self.validate(content, filename)
        return content

    def render_package_init(self, classes: Iterable[DefinedClass]) -> str:
        """Render the ``__init__.py`` re-exporting one module per class."""
        template = self.env.get_template("package_init.py.j2")
        content = template.render(class_names=[c.name for c in classes])
        self.validate(content, "__init__.py")
        return content

    @staticmethod
    def validate(content: str, filename: str):
        """Check that generated code is valid Python syntax."""
        try:
            ast.parse(content)
        except SyntaxError as e:
            raise GenerationError(f"Generated invalid Python for {filename}: {e}") from e
