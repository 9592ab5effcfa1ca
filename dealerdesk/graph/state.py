# dealerdesk/graph/state.py
import operator
from typing import Annotated, Any, Dict, List, Literal, Optional, TypedDict

Intent = Literal["sku", "claim", "sale", "general"]
Record = Dict[str, Any]

class QueryState(TypedDict, total=False):
    query: str
    role: str
    remote_enabled: bool
    intent: Intent
    records: List[Record]
    # general intent: one sample per kind, filled by parallel nodes
    sample_skus: List[Record]
    sample_claims: List[Record]
    sample_sales: List[Record]
    store_errors: Annotated[List[str], operator.add]
    digest: str
    outcome: str
    answer: Optional[str]
    used_remote: bool
