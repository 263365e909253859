# Default proximity tolerance for welding, snapping and splitting
DEFAULT_TOLERANCE = 1.0e-9

# Below this |determinant| two segments are treated as parallel
PARALLEL_EPSILON = 1.0e-18

# Arcs sweeping or spanning less than this are not exported
MIN_ARC_SWEEP = 1.0e-12
MIN_ARC_RADIUS = 1.0e-12

KDTREE_LEAF_SIZE = 8

SECTION_CURVES = "curves"
SECTION_POINTS = "points"
SECTION_CONSTRAINTS = "constraints"
SECTION_PLANE = "plane"
SECTION_PLANE_ID = "planeId"

TAG_LINE = "L"
TAG_ARC = "A"
TAG_POINT = "P"
TAG_COINCIDENT = "C"

# Token count of each record, tag included
RECORD_LENGTHS = {
    TAG_LINE: 5,
    TAG_ARC: 8,
    TAG_POINT: 3,
    TAG_COINCIDENT: 5,
}
