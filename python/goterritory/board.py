import numpy as np

EMPTY = 0
BLACK = 1
WHITE = 2

Loc = int
Player = int

class BoardInputError(ValueError):
    pass

class ScoringInternalError(RuntimeError):
    pass

def check(condition, message=None):
    """Internal invariant check. Unlike a bare assert, this is never compiled away."""
    if not condition:
        raise ScoringInternalError(message or "Internal check failed")

def get_opp(pla):
    return 3-pla

#Immutable snapshot of a position to be scored: stones plus the caller's dead marks.
#Locs are y*xsize+x, all grids are flat numpy arrays indexed by loc.
class BoardPosition:

    def __init__(self,ysize,xsize,stones,marked_dead):
        if ysize < 1 or xsize < 1:
            raise BoardInputError("Invalid board size: " + str(ysize) + "x" + str(xsize))
        self.ysize = ysize
        self.xsize = xsize
        self.arrsize = ysize * xsize

        self.stones = np.array(stones, dtype=np.int8).reshape(self.arrsize)
        self.marked_dead = np.array(marked_dead, dtype=bool).reshape(self.arrsize)
        self.stones.flags.writeable = False
        self.marked_dead.flags.writeable = False

        #On-board orthogonal neighbors of each loc, in the order up, down, left, right
        self.adj = []
        for loc in range(self.arrsize):
            x = loc % xsize
            y = loc // xsize
            neighbors = []
            if y > 0:
                neighbors.append(loc - xsize)
            if y < ysize-1:
                neighbors.append(loc + xsize)
            if x > 0:
                neighbors.append(loc - 1)
            if x < xsize-1:
                neighbors.append(loc + 1)
            self.adj.append(neighbors)

    @staticmethod
    def from_grids(stones, marked_dead):
        """Validate and build a BoardPosition from [y][x] grids.

        stones -- rows of EMPTY / BLACK / WHITE
        marked_dead -- rows of bools, same dimensions as stones

        Raises BoardInputError on any malformed input, before any analysis is done.
        """
        if isinstance(stones, np.ndarray):
            stones = stones.tolist()
        if isinstance(marked_dead, np.ndarray):
            marked_dead = marked_dead.tolist()

        ysize = len(stones)
        if ysize <= 0:
            raise BoardInputError("stones has no rows")
        xsize = len(stones[0])
        if xsize <= 0:
            raise BoardInputError("stones has no columns")

        for row in stones:
            if len(row) != xsize:
                raise BoardInputError(f"Not all rows in stones are the same length {xsize}")
            for value in row:
                if isinstance(value, bool) or value not in (EMPTY, BLACK, WHITE):
                    raise BoardInputError("Unexpected value in stones " + str(value))

        if len(marked_dead) != ysize:
            raise BoardInputError(f"marked_dead is not the same length as stones {ysize}")
        for row in marked_dead:
            if len(row) != xsize:
                raise BoardInputError(f"Not all rows in marked_dead are the same length as stones {xsize}")

        return BoardPosition(ysize, xsize, [[int(v) for v in row] for row in stones], [[bool(v) for v in row] for row in marked_dead])

    def loc(self,x,y):
        return x + self.xsize * y
    def loc_x(self,loc):
        return loc % self.xsize
    def loc_y(self,loc):
        return loc // self.xsize

    def is_on_board(self,x,y):
        return x >= 0 and y >= 0 and x < self.xsize and y < self.ysize

    def is_on_border(self,loc):
        x = self.loc_x(loc)
        y = self.loc_y(loc)
        return y == 0 or x == 0 or y == self.ysize-1 or x == self.xsize-1

    def is_adjacent(self,loc1,loc2):
        return loc2 in self.adj[loc1]

    #A stone of pla that has not been marked dead
    def is_live(self,loc,pla):
        return self.stones[loc] == pla and not self.marked_dead[loc]

    def new_grid(self,value,dtype):
        return np.full(self.arrsize, value, dtype=dtype)

    def to_grid(self,flat):
        """Reshape a flat per-loc array into nested [y][x] python lists."""
        return np.asarray(flat).reshape(self.ysize,self.xsize).tolist()

    def to_string(self):
        def get_piece(x,y):
            loc = self.loc(x,y)
            if self.stones[loc] == BLACK:
                return 'X ' if self.marked_dead[loc] else 'x '
            elif self.stones[loc] == WHITE:
                return 'O ' if self.marked_dead[loc] else 'o '
            else:
                return '. '

        return "\n".join("".join(get_piece(x,y) for x in range(self.xsize)).rstrip() for y in range(self.ysize))


#Symmetries are numbered 0-7: bit 2 transposes, bit 1 flips x, bit 0 flips y, applied in that order.
def sym_grid(grid, symmetry):
    arr = np.asarray(grid)
    if symmetry & 4:
        arr = arr.T
    if symmetry & 2:
        arr = arr[:, ::-1]
    if symmetry & 1:
        arr = arr[::-1, :]
    return arr

def unsym_grid(grid, symmetry):
    arr = np.asarray(grid)
    if symmetry & 1:
        arr = arr[::-1, :]
    if symmetry & 2:
        arr = arr[:, ::-1]
    if symmetry & 4:
        arr = arr.T
    return arr
