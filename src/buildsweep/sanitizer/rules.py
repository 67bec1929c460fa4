"""Node classification for the sanitizer's tree rewrites."""

from typing import FrozenSet, Iterable, List, Optional, Tuple

from tree_sitter import Node

from ..models import SourceEdit, TransformRule
from .scope import ScopeIndex

COMMENT_NODE_TYPES = frozenset({"comment", "html_comment"})

# Parents whose children form a statement list, so a statement can simply vanish
STATEMENT_LIST_TYPES = frozenset({
    "program",
    "statement_block",
    "switch_case",
    "switch_default",
    "class_static_block",
})

ACCESS_NODE_TYPES = frozenset({"member_expression", "subscript_expression"})
PROPERTY_NODE_TYPES = frozenset({"property_identifier", "identifier"})
STRING_NODE_TYPES = frozenset({"string"})

# console.log.call(console, x) and console.log.apply(console, args) are calls too
FORWARDING_METHODS = frozenset({"call", "apply"})
BIND_METHOD = "bind"

EMPTY_BLOCK = "{}"
VOID_EXPRESSION = "void 0"
NOOP_FUNCTION = "function () {}"


class RuleMatcher:
    """
    Classify syntax tree nodes into transform rules and build their edits.

    Each node maps to at most one TransformRule; the driver in
    SourceSanitizer does not descend into a node once it matched.

    Diagnostic shapes handled, for a removable severity:
        console.log(x)              call, removed or ``void 0``
        console['log'](x)           same, string subscripts only
        console.log.call(c, x)      same, also ``.apply``
        console.log.bind(console)   ``function () {}``
        const log = console.log     ``function () {}``

    GOTCHA: A locally bound ``console`` (parameter, variable, import...) is
            not the diagnostic object and is never touched
    """

    def __init__(
        self,
        source: bytes,
        rules: Iterable[TransformRule],
        diagnostic_objects: Iterable[str] = ("console",),
        preserved_severities: Iterable[str] = ("error", "warn"),
    ):
        self.source = source
        self.rules: FrozenSet[TransformRule] = frozenset(rules)
        self.diagnostic_objects = frozenset(diagnostic_objects)
        self.preserved_severities = frozenset(preserved_severities)
        self.scopes = ScopeIndex(source)

    def _text(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def _access(self, node: Optional[Node]) -> Optional[Tuple[Node, str]]:
        """(object, property name) of ``a.b`` or ``a['b']``."""
        if node is None or node.type not in ACCESS_NODE_TYPES:
            return None
        target = node.child_by_field_name("object")
        if node.type == "member_expression":
            prop = node.child_by_field_name("property")
            if target is None or prop is None or prop.type not in PROPERTY_NODE_TYPES:
                return None
            return target, self._text(prop)
        index = node.child_by_field_name("index")
        if target is None or index is None or index.type not in STRING_NODE_TYPES:
            return None
        return target, self._text(index)[1:-1]

    def reference_severity(self, node: Optional[Node]) -> Optional[str]:
        """
        Return the severity named by a diagnostic reference, or None.

        ``console.debug`` -> "debug"; ``console?.["log"]`` -> "log".
        """
        access = self._access(node)
        if access is None:
            return None
        target, severity = access
        if target.type != "identifier" or self._text(target) not in self.diagnostic_objects:
            return None
        if self.scopes.is_bound(target):
            return None
        return severity

    def is_removable_reference(self, node: Optional[Node]) -> bool:
        severity = self.reference_severity(node)
        return severity is not None and severity not in self.preserved_severities

    def severity_of(self, call: Node) -> Optional[str]:
        """
        Return the severity of a diagnostic call, or None for other calls.

        ``console.log(x)`` -> "log"; ``console.info.apply(console, a)`` -> "info".
        """
        if call.type != "call_expression":
            return None
        callee = call.child_by_field_name("function")
        severity = self.reference_severity(callee)
        if severity is not None:
            return severity
        access = self._access(callee)
        if access is not None and access[1] in FORWARDING_METHODS:
            return self.reference_severity(access[0])
        return None

    def is_removable_call(self, node: Node) -> bool:
        severity = self.severity_of(node)
        return severity is not None and severity not in self.preserved_severities

    def is_removable_bind(self, node: Node) -> bool:
        """True for ``console.log.bind(...)`` on a removable severity."""
        if node.type != "call_expression":
            return False
        access = self._access(node.child_by_field_name("function"))
        return (
            access is not None
            and access[1] == BIND_METHOD
            and self.is_removable_reference(access[0])
        )

    def is_detached_reference(self, node: Node) -> bool:
        """
        True for a removable reference used as a value.

        References that are the object of a further access, or the target of
        an assignment, are left alone.
        """
        if not self.is_removable_reference(node):
            return False
        parent = node.parent
        if parent is None:
            return True
        if parent.type in ACCESS_NODE_TYPES and parent.child_by_field_name("object") == node:
            return False
        if parent.type in ("assignment_expression", "augmented_assignment_expression"):
            return parent.child_by_field_name("left") != node
        return True

    def _statement_expression(self, node: Node) -> Optional[Node]:
        """The single expression an expression statement consists of."""
        named = [child for child in node.named_children if child.type not in COMMENT_NODE_TYPES]
        return named[0] if len(named) == 1 else None

    def _is_removable_expression(self, node: Node) -> bool:
        return (
            self.is_removable_call(node)
            or self.is_removable_bind(node)
            or self.is_detached_reference(node)
        )

    def _edit(self, node: Node, replacement: str) -> SourceEdit:
        return SourceEdit(
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            replacement=replacement,
            rule=TransformRule.REMOVE_DIAGNOSTIC_CALL,
        )

    def match(self, node: Node) -> Optional[SourceEdit]:
        """Return the edit for ``node`` or None when no rule applies."""
        if node.type in COMMENT_NODE_TYPES:
            if TransformRule.STRIP_COMMENTS not in self.rules:
                return None
            return SourceEdit(
                start_byte=node.start_byte,
                end_byte=node.end_byte,
                rule=TransformRule.STRIP_COMMENTS,
            )

        if TransformRule.REMOVE_DIAGNOSTIC_CALL not in self.rules:
            return None

        if node.type == "expression_statement":
            expression = self._statement_expression(node)
            if expression is None or not self._is_removable_expression(expression):
                return None
            parent = node.parent
            in_list = parent is None or parent.type in STATEMENT_LIST_TYPES
            return self._edit(node, "" if in_list else EMPTY_BLOCK)

        if node.type == "call_expression":
            if self.is_removable_call(node):
                return self._edit(node, VOID_EXPRESSION)
            if self.is_removable_bind(node):
                return self._edit(node, NOOP_FUNCTION)
            return None

        if node.type in ACCESS_NODE_TYPES and self.is_detached_reference(node):
            return self._edit(node, NOOP_FUNCTION)

        return None


def collect_edits(root: Node, matcher: RuleMatcher) -> List[SourceEdit]:
    """
    Walk the whole tree once and collect every edit.

    Matched subtrees are not descended into, so edits never overlap.
    Returned in document order.
    """
    edits: List[SourceEdit] = []
    stack = [root]
    while stack:
        node = stack.pop()
        edit = matcher.match(node)
        if edit is not None:
            edits.append(edit)
            continue
        stack.extend(reversed(node.children))
    edits.sort(key=lambda e: e.start_byte)
    return edits
