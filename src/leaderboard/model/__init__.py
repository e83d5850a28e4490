"""
The MODEL layer contains pure data structures.
It has NO knowledge of Qt. It deals with the value matrix, the normalization
relation, card positions and I/O.
"""
