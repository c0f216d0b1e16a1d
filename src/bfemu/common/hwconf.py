TAPE_SIZE        = 30000
CELL_WIDTH       = 8
MAX_CELL_WIDTH   = 64

EOF_UNCHANGED    = 'unchanged'    # leave the cell as it is
EOF_ZERO         = 'zero'         # store 0
EOF_MAX          = 'max'          # store all ones, what getchar() EOF ends up as in a byte cell
EOF_POLICIES     = (EOF_UNCHANGED, EOF_ZERO, EOF_MAX)

EXIT_HALT        = 0
EXIT_ERROR       = 1
EXIT_KEYBOARD    = 3
