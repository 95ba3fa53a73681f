"""
# PNG as a container.

A PNG file is a signature followed by a sequence of chunks: each one has a length, a type,
some data and a CRC. Decoders skip the ancillary chunks they don't know, so a chunk with
a private type can carry any kind of data without spoiling the image.

The formats are described as classes with fields, in the spirit of an ORM, and
two basic main operations are defined for the file format and its sub components:

 1. unpack(): the more straightforward, i.e., reading the binary data
    and build a high-level representation of that.
    Usually when unpacking you use as offset the actual offset of the
    stream and the chunk itself knows how many bytes needs to read
    to finalize the representation

 2. pack(): encode the high-level representation into binary data.

to these we add one more

 3. relayout(): recalculate offset and size of a component and its subcomponents.
    A packing implies a relayouting.

An instance goes through the phases

 1. INIT
 2. RELAYOUTING
 3. PACKING
 4. UNPACKING
 5. DONE

The functions in pngchunks.png.api are the entry point to work with PNG files
as containers.
"""
