# Tape
RIGHT = '>'   # TP + 1 -> TP
LEFT = '<'    # TP - 1 -> TP
INC = '+'     # T[TP] + 1 -> T[TP]
DEC = '-'     # T[TP] - 1 -> T[TP]

# I/O
OUT = '.'     # T[TP] -> output
INP = ','     # input -> T[TP]

# Control
ENTER = '['   # if T[TP] .eq 0 jmp past matching EXIT
EXIT = ']'    # if T[TP] .ne 0 jmp back into the body

# Emulated
END = ''      # fetched past the last instruction

ALPHABET = frozenset((RIGHT, LEFT, INC, DEC, OUT, INP, ENTER, EXIT))
