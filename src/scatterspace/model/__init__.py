"""
The MODEL layer contains pure data structures and business logic.
It has NO knowledge of the scene renderer. It deals with the point table,
its selections, the domain mapping and the spatial selection shapes.
"""
