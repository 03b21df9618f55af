from .bidiagonal import bidiagonalize, generate_u, generate_v, reduce_to_bidiagonal
