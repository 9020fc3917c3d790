"""
Test helpers and declaration source snippets
"""
import logging

from dts_postprocess.models.declaration_node import NodeKind


def find(tree, name, kind=None):
    """First top level declaration with the given name"""
    for node in tree.children:
        if node.name == name and (kind is None or node.kind == kind):
            return node
    raise LookupError(name)


def find_class(tree, name):
    return find(tree, name, NodeKind.CLASS)


def param_types(member):
    return [param.type_text for param in member.parameters]


def warning_messages(caplog):
    return [record.getMessage() for record in caplog.records if record.levelno == logging.WARNING]


BASE_CHILD_SOURCE = """\
export declare class Base {
    foo(a: number, b: string): void;
}
/** @inheritDoc */
export declare class Child extends Base {
    foo(a: any, b: any): void;
}
"""

ARITY_MISMATCH_SOURCE = """\
export declare class Base {
    foo(a: number, b: string): void;
}
/** @inheritDoc */
export declare class Child extends Base {
    foo(a: any): void;
}
"""

MULTI_LEVEL_SOURCE = """\
export declare class A {
    foo(n: number): void;
}
export declare class B extends A {
    bar(): void;
}
export declare class C extends B {
    /** @inheritDoc */
    foo(n: any): void;
}
"""
