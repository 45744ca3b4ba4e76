"""Pure request builders: engine ids, activities, work items.

Nothing in this package performs I/O.
"""
