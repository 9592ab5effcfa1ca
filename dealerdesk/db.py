from sqlalchemy import Column, Float, Integer, MetaData, String, Table, create_engine
from sqlalchemy.engine import Engine

metadata = MetaData()

# dates are ISO strings (YYYY-MM-DD) so they sort and compare as text
skus = Table(
    "skus", metadata,
    Column("id", String, primary_key=True),
    Column("name", String, nullable=False),
    Column("category", String, nullable=False),
    Column("zone", String, nullable=False),
    Column("warehouse", String, nullable=False),
    Column("stock", Integer, nullable=False, default=0),
    Column("price", Float, nullable=False, default=0),
    Column("description", String, nullable=False, default=""),
)

claims = Table(
    "claims", metadata,
    Column("id", String, primary_key=True),
    Column("dealer_id", String, nullable=False),
    Column("dealer_name", String, nullable=False),
    Column("amount", Float, nullable=False, default=0),
    Column("status", String, nullable=False, default="Pending"),
    Column("type", String, nullable=False),
    Column("submitted_date", String, nullable=False),
    Column("resolved_date", String, nullable=True),
)

sales = Table(
    "sales", metadata,
    Column("id", String, primary_key=True),
    Column("dealer_id", String, nullable=False),
    Column("dealer_name", String, nullable=False),
    Column("sku_id", String, nullable=False),
    Column("sku_name", String, nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("amount", Float, nullable=False, default=0),
    Column("date", String, nullable=False),
    Column("region", String, nullable=False),
    Column("zone", String, nullable=False),
)

dealers = Table(
    "dealers", metadata,
    Column("id", String, primary_key=True),
    Column("name", String, nullable=False),
    Column("region", String, nullable=False),
    Column("zone", String, nullable=False),
    Column("city", String, nullable=False),
    Column("contact", String, nullable=False, default=""),
    Column("status", String, nullable=False, default="Active"),
)

TABLES = {"skus": skus, "claims": claims, "sales": sales, "dealers": dealers}

def make_engine(url: str) -> Engine:
    return create_engine(url, future=True, echo=False)

def init_db(engine: Engine) -> None:
    metadata.create_all(engine)
