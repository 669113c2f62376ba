from .matrix import Matrix, as_matrix
from .vec import Vec, VEC_SIZES
