"""
Generic Lookup API
Substring search over an allow-listed table and column
"""
from typing import Optional

from fastapi import APIRouter, Query

from consulta.api.dependencies import require_param
from consulta.core.database import store_session
from consulta.repositories.lookup_repository import LookupRepository, build_lookup

router = APIRouter()


@router.get("/consulta-generica")
def generic_lookup(
    tabela: Optional[str] = Query(None, description="Table name"),
    coluna: Optional[str] = Query(None, description="Column name"),
    valor: Optional[str] = Query(None, description="Text contained in the column")
):
    """Rows of `tabela` whose `coluna` contains `valor` (case-insensitive)"""
    spec = build_lookup(
        require_param(tabela, "tabela"),
        require_param(coluna, "coluna"),
        require_param(valor, "valor"),
    )

    with store_session() as session:
        return LookupRepository(session).search(spec)
