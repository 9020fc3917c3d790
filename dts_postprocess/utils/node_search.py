"""
Node search and query utilities
"""
from dts_postprocess.models.declaration_node import NodeKind


class NodeSearch:
    """Search and query declaration nodes"""

    @staticmethod
    def search_member(node, member_name):
        """
        Search for members of a class / interface by name

        Returns:
            List of matching member nodes (overloads included)
        """
        return [member for member in node.members if member.name == member_name]

    @staticmethod
    def search_overloads(node, member):
        """
        Search a class for the declarations matching a method or constructor

        Args:
            node: CLASS DeclarationNode searched
            member: METHOD or CONSTRUCTOR DeclarationNode of another class

        Returns:
            List of same kind, same named members in declaration order
        """
        if member.kind == NodeKind.CONSTRUCTOR:
            return [child for child in node.children if child.kind == NodeKind.CONSTRUCTOR]
        return [found for found in NodeSearch.search_member(node, member.name) if found.kind == NodeKind.METHOD]

    @staticmethod
    def base_class(registry, node):
        """Declaration of the class a class extends, when registered"""
        name = node.base_class_name()
        return registry.get(name) if name else None
