from treewalk.shrink.subtree import ShrinkResult, shrink_tree

__all__ = ["ShrinkResult", "shrink_tree"]
