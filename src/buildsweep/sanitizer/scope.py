"""Lexical binding lookup over a tree-sitter syntax tree."""

from typing import Dict, FrozenSet, Iterator, Optional, Set, Tuple

from tree_sitter import Node

FUNCTION_NODE_TYPES = frozenset({
    "function_declaration",
    "function_expression",
    "function",
    "generator_function",
    "generator_function_declaration",
    "arrow_function",
    "method_definition",
})

# Function and class expressions bind their own name inside themselves
SELF_NAMED_TYPES = frozenset({"function_expression", "function", "generator_function", "class"})

BLOCK_SCOPE_TYPES = frozenset({
    "program",
    "statement_block",
    "class_static_block",
    "switch_case",
    "switch_default",
})

NAMED_DECLARATION_TYPES = frozenset({
    "function_declaration",
    "generator_function_declaration",
    "class_declaration",
    "abstract_class_declaration",
    "enum_declaration",
})


class ScopeIndex:
    """
    Answers "is this identifier bound by a local declaration?".

    PATTERN: Walk ancestors, look the name up in each scope's bindings
    GOTCHA: Bindings are computed once per scope node and cached, a file with
            many lookups in the same function pays for that function once
    """

    def __init__(self, source: bytes):
        self.source = source
        self._bindings: Dict[Tuple[int, int, str], FrozenSet[str]] = {}

    def _text(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def is_bound(self, identifier: Node) -> bool:
        """True when a parameter, variable, function, class or import shadows the name."""
        name = self._text(identifier)
        scope = identifier.parent
        while scope is not None:
            if name in self.bindings(scope):
                return True
            scope = scope.parent
        return False

    def bindings(self, scope: Node) -> FrozenSet[str]:
        """Names declared by ``scope``; empty for nodes that open no scope."""
        key = (scope.start_byte, scope.end_byte, scope.type)
        cached = self._bindings.get(key)
        if cached is None:
            cached = frozenset(self._collect(scope))
            self._bindings[key] = cached
        return cached

    def _collect(self, scope: Node) -> Set[str]:
        names: Set[str] = set()
        kind = scope.type

        if kind in FUNCTION_NODE_TYPES:
            params = scope.child_by_field_name("parameters")
            if params is not None:
                for param in params.named_children:
                    names.update(self._pattern_names(param))
            names.update(self._pattern_names(scope.child_by_field_name("parameter")))
            body = scope.child_by_field_name("body")
            if body is not None and body.type == "statement_block":
                names.update(self._hoisted_names(body))

        if kind in SELF_NAMED_TYPES:
            name = scope.child_by_field_name("name")
            if name is not None:
                names.add(self._text(name))

        if kind in BLOCK_SCOPE_TYPES:
            for child in scope.named_children:
                names.update(self._declared_names(child))
            if kind == "program":
                names.update(self._hoisted_names(scope))
        elif kind == "for_statement":
            names.update(self._declared_names(scope.child_by_field_name("initializer")))
        elif kind == "for_in_statement":
            if scope.child_by_field_name("kind") is not None:
                names.update(self._pattern_names(scope.child_by_field_name("left")))
        elif kind == "catch_clause":
            names.update(self._pattern_names(scope.child_by_field_name("parameter")))

        return names

    def _declared_names(self, statement: Optional[Node]) -> Iterator[str]:
        if statement is None:
            return
        kind = statement.type
        if kind == "export_statement":
            yield from self._declared_names(statement.child_by_field_name("declaration"))
        elif kind in ("lexical_declaration", "variable_declaration"):
            for declarator in statement.named_children:
                if declarator.type == "variable_declarator":
                    yield from self._pattern_names(declarator.child_by_field_name("name"))
        elif kind in NAMED_DECLARATION_TYPES:
            name = statement.child_by_field_name("name")
            if name is not None:
                yield self._text(name)
        elif kind == "import_statement":
            yield from self._import_names(statement)

    def _import_names(self, statement: Node) -> Iterator[str]:
        for clause in statement.named_children:
            if clause.type != "import_clause":
                continue
            for part in clause.named_children:
                if part.type == "identifier":
                    yield self._text(part)
                elif part.type == "namespace_import":
                    for ident in part.named_children:
                        if ident.type == "identifier":
                            yield self._text(ident)
                elif part.type == "named_imports":
                    for specifier in part.named_children:
                        if specifier.type != "import_specifier":
                            continue
                        local = specifier.child_by_field_name("alias")
                        if local is None:
                            local = specifier.child_by_field_name("name")
                        if local is not None:
                            yield self._text(local)

    def _pattern_names(self, pattern: Optional[Node]) -> Iterator[str]:
        """Identifiers bound by a parameter or destructuring pattern."""
        if pattern is None:
            return
        kind = pattern.type
        if kind in ("identifier", "shorthand_property_identifier_pattern"):
            yield self._text(pattern)
        elif kind in ("object_pattern", "array_pattern", "rest_pattern"):
            for child in pattern.named_children:
                yield from self._pattern_names(child)
        elif kind == "pair_pattern":
            yield from self._pattern_names(pattern.child_by_field_name("value"))
        elif kind in ("assignment_pattern", "object_assignment_pattern"):
            yield from self._pattern_names(pattern.child_by_field_name("left"))
        elif kind in ("required_parameter", "optional_parameter"):
            yield from self._pattern_names(pattern.child_by_field_name("pattern"))

    def _hoisted_names(self, body: Node) -> Iterator[str]:
        """``var`` declarations anywhere in a function body, nested functions excluded."""
        stack = list(body.named_children)
        while stack:
            node = stack.pop()
            if node.type in FUNCTION_NODE_TYPES:
                continue
            if node.type == "variable_declaration":
                yield from self._declared_names(node)
            elif node.type == "for_in_statement":
                kind = node.child_by_field_name("kind")
                if kind is not None and self._text(kind) == "var":
                    yield from self._pattern_names(node.child_by_field_name("left"))
            stack.extend(node.named_children)
