from .householder import (
    apply_row_reflector,
    column_reflector,
    hypot_norm,
    reflect_columns,
    row_reflector,
)
