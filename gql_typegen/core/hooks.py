"""Generation hooks for customizing code generation.

Provides protocols for pre- and post-generation hooks that can rewrite query
documents before generation or transform the generated code after.

Example usage:
    from gql_typegen.core.hooks import PreGenerateHook, PostGenerateHook

    # Pre-generation hook to rewrite documents
    class StripComments(PreGenerateHook):
        def pre_generate(self, declaration):
            text = "\\n".join(l for l in declaration.query_text.splitlines() if not l.lstrip().startswith("#"))
            return QueryDeclaration(text, declaration.source)

    # Post-generation hook to add headers
    class AddLicenseHeader(PostGenerateHook):
        def post_generate(self, filename, content):
            header = "# Copyright 2024 My Company\\n\\n"
            return header + content
"""

from typing import Protocol, runtime_checkable

from .parser import QueryDeclaration


@runtime_checkable
class PreGenerateHook(Protocol):
    """Protocol for pre-generation hooks.

    Pre-generation hooks receive each query document before classes are
    generated from it and can replace it.

    Example:
        class PrefixOperations(PreGenerateHook):
            def pre_generate(self, declaration: QueryDeclaration) -> QueryDeclaration:
                text = declaration.query_text.replace("query ", "query Admin")
                return QueryDeclaration(text, declaration.source)
    """

    def pre_generate(self, declaration: QueryDeclaration) -> QueryDeclaration:
        """Called before classes are generated from a document.

        Args:
            declaration: The query document and where it came from

        Returns:
            The (possibly replaced) document to generate from
        """
        ...


@runtime_checkable
class PostGenerateHook(Protocol):
    """Protocol for post-generation hooks.

    Post-generation hooks receive the generated code for each file
    and can transform it before it's written to disk.

    Example:
        class FormatWithBlack(PostGenerateHook):
            def post_generate(self, filename: str, content: str) -> str:
                import black
                return black.format_str(content, mode=black.FileMode())
    """

    def post_generate(self, filename: str, content: str) -> str:
        """Called after code generation for each file.

        Args:
            filename: The name of the generated file (e.g., "queries.py")
            content: The generated code content

        Returns:
            The (possibly transformed) code to write
        """
        ...


class AddHeaderHook:
    """Built-in hook to add a header to generated files.

    Example:
        hook = AddHeaderHook("# Auto-generated - do not edit")
    """

    def __init__(self, header: str):
        self.header = header

    def post_generate(self, _filename: str, content: str) -> str:
        """Add a header to the beginning of the file."""
        if not self.header.endswith("\n"):
            header = self.header + "\n\n"
        else:
            header = self.header + "\n"
        return header + content


class HookRunner:
    """Runs a collection of hooks in order."""

    def __init__(self):
        self.pre_hooks: list[PreGenerateHook] = []
        self.post_hooks: list[PostGenerateHook] = []

    def add_pre_hook(self, hook: PreGenerateHook):
        """Add a pre-generation hook."""
        self.pre_hooks.append(hook)

    def add_post_hook(self, hook: PostGenerateHook):
        """Add a post-generation hook."""
        self.post_hooks.append(hook)

    def run_pre_hooks(self, declaration: QueryDeclaration) -> QueryDeclaration:
        """Run all pre-generation hooks in order."""
        for hook in self.pre_hooks:
            declaration = hook.pre_generate(declaration)
        return declaration

    def run_post_hooks(self, filename: str, content: str) -> str:
        """Run all post-generation hooks in order."""
        for hook in self.post_hooks:
            content = hook.post_generate(filename, content)
        return content
