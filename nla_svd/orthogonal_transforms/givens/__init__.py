from .givens import givens_rotation, rotate_columns, swap_columns
