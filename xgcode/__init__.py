"""
# xgcode: the container of the ".gx" print files

Some consumer 3D printers (FlashForge Finder/Adventurer/Dreamer, Dremel 3D20/3D40)
don't accept bare g-code but a container made of three parts:

 1. a fixed layout binary header with the print metadata shown on the display
 2. a BMP thumbnail
 3. the g-code itself

The package is built on a tiny declarative framework for binary records
(core.Chunk and the classes in fields) and offers two main operations
on the container

 1. decode: from the raw bytes to the header and the regions of the
    thumbnail and of the g-code, validating the structure.

 2. encode: from the high-level representation back to the exact bytes
    the firmware expects; an unmodified decoded container encodes into
    the very same bytes it was decoded from.

and to these we add one more

 3. relayout: when the thumbnail changes size, the offsets stored into
    the header are computed again and the g-code moves accordingly.

See header.py for the layouts and container.py for the composition.
"""
