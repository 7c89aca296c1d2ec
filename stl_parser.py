import logging
import os
import struct

from geometry_ops import Triangle, as_point3, as_vector3

logger = logging.getLogger(__name__)

HEADER_SIZE = 80
RECORD_SIZE = 50


def read_binary_stl(filename):
    """Yield the triangles of a binary STL file.

    A truncated record ends the sequence.
    """
    with open(filename, 'rb') as file:
        header = file.read(HEADER_SIZE)
        count_bytes = file.read(4)
        if len(header) < HEADER_SIZE or len(count_bytes) < 4:
            return
        triangle_count = struct.unpack('<I', count_bytes)[0]

        for _ in range(triangle_count):
            record = file.read(RECORD_SIZE)
            if len(record) < RECORD_SIZE:
                logger.debug("Binary STL %s truncated before declared count %d", filename, triangle_count)
                return
            values = struct.unpack('<12fH', record)
            normal = as_vector3(values[0:3])
            vertex1 = as_point3(values[3:6])
            vertex2 = as_point3(values[6:9])
            vertex3 = as_point3(values[9:12])
            yield Triangle(normal, vertex1, vertex2, vertex3)


def _parse_keyword_triple(line, keyword):
    fields = line.split()
    words = keyword.split()
    if fields[:len(words)] != words or len(fields) != len(words) + 3:
        return None
    try:
        return tuple(float(value) for value in fields[len(words):])
    except ValueError:
        return None


def _read_ascii_triangle(lines):
    normal = _parse_keyword_triple(next(lines, ''), 'facet normal')
    if normal is None:
        return None
    if 'outer loop' not in next(lines, ''):
        return None

    vertices = []
    for _ in range(3):
        vertex = _parse_keyword_triple(next(lines, ''), 'vertex')
        if vertex is None:
            return None
        vertices.append(as_point3(vertex))

    if 'endloop' not in next(lines, ''):
        return None
    if 'endfacet' not in next(lines, ''):
        return None

    return Triangle(as_vector3(normal), *vertices)


def read_ascii_stl(filename):
    """Yield the triangles of an ASCII STL file.

    The first line (``solid name``) is skipped. Reading stops at the first
    record that does not parse, including the closing ``endsolid`` line.
    Undecodable bytes never raise; they fail to parse like any bad record.
    """
    with open(filename, 'r', errors='replace') as file:
        lines = iter(file)
        next(lines, None)
        while True:
            triangle = _read_ascii_triangle(lines)
            if triangle is None:
                return
            yield triangle


def is_binary_stl(filename):
    size = os.path.getsize(filename)
    with open(filename, 'rb') as file:
        head = file.read(HEADER_SIZE + 4)

    if len(head) == HEADER_SIZE + 4:
        triangle_count = struct.unpack('<I', head[HEADER_SIZE:])[0]
        if size == HEADER_SIZE + 4 + RECORD_SIZE * triangle_count:
            return True
    return not head.lstrip().startswith(b'solid')


def read_stl(filename):
    if is_binary_stl(filename):
        logger.info("Reading binary STL %s", filename)
        return read_binary_stl(filename)
    logger.info("Reading ASCII STL %s", filename)
    return read_ascii_stl(filename)
