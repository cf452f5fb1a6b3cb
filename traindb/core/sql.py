from sqlalchemy import String
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import FunctionElement

PADDED_ID_WIDTH = 3


class padded_id(FunctionElement):
    """
    Integer id rendered as zero-padded text of PADDED_ID_WIDTH characters.

    Follows PostgreSQL LPAD semantics: shorter values are left-padded with zeros and
    longer values are cut to their first PADDED_ID_WIDTH characters (6011 -> '601').
    """
    type = String()
    name = "padded_id"
    inherit_cache = True


@compiles(padded_id)
def _compile_padded_id(element, compiler, **kw):
    return "LPAD(CAST(%s AS TEXT), %d, '0')" % (
        compiler.process(element.clauses, **kw),
        PADDED_ID_WIDTH,
    )


@compiles(padded_id, "sqlite")
def _compile_padded_id_sqlite(element, compiler, **kw):
    return "substr(printf('%%0%dd', %s), 1, %d)" % (
        PADDED_ID_WIDTH,
        compiler.process(element.clauses, **kw),
        PADDED_ID_WIDTH,
    )
