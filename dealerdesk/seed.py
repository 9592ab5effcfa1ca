# dealerdesk/seed.py
"""Fixed demo data for the dashboard. Same rows on every run."""
import logging
from typing import Any, Dict, List

from sqlalchemy.engine import Engine

from .config import DATABASE_URL, ensure_dirs
from .db import TABLES, init_db, make_engine
from .models import RECORD_MODELS, as_row

log = logging.getLogger(__name__)

# ---------------------------
# Dealers
# ---------------------------
dealers = [
  # id,     name,                 region,      zone,      city,        contact
  ("D001", "Raj Electronics",    "Chennai",   "South",   "Chennai",   "+91-9876543210"),
  ("D002", "Kumar Traders",      "Mumbai",    "West",    "Mumbai",    "+91-9876501234"),
  ("D003", "Sharma Industries",  "Delhi",     "North",   "Delhi",     "+91-9811122233"),
  ("D004", "Patel Corp",         "Bangalore", "South",   "Bangalore", "+91-9900011122"),
  ("D005", "Bose Distributors",  "Kolkata",   "East",    "Kolkata",   "+91-9830045678"),
  ("D006", "Deccan Supplies",    "Hyderabad", "Central", "Hyderabad", "+91-9848012345", "Inactive"),
]

# ---------------------------
# SKUs
# ---------------------------
skus = [
  # id,          name,                     category,      zone,      warehouse,   stock, price
  ("SKU00001", "Inverter 1.5kVA",          "Electronics", "South",   "Chennai",     120, 18500),
  ("SKU00002", "Ceiling Fan 1200mm",       "Appliances",  "South",   "Chennai",      45,  3200),
  ("SKU00003", "Cordless Drill 18V",       "Tools",       "West",    "Mumbai",       60,  7499),
  ("SKU00004", "Copper Wire Coil 90m",     "Components",  "North",   "Delhi",       300,  2650),
  ("SKU00005", "LED Panel 40W",            "Electronics", "South",   "Bangalore",     0,  1450),
  ("SKU00006", "Mixer Grinder 750W",       "Appliances",  "East",    "Kolkata",      35,  4999),
  ("SKU00007", "Angle Grinder 4in",        "Tools",       "West",    "Pune",         18,  3899),
  ("SKU00008", "MCB Distribution Board",   "Components",  "Central", "Hyderabad",    75,  5600),
  ("SKU00009", "Surge Protector 6-way",    "Accessories", "North",   "Delhi",       210,   899),
  ("SKU00010", "Water Heater 25L",         "Appliances",  "West",    "Mumbai",       12, 11250),
  ("SKU00011", "Solar Charge Controller",  "Electronics", "Central", "Hyderabad",     8, 24999),
  ("SKU00012", "Cable Tie Pack (100)",     "Accessories", "South",   "Chennai",     940,   150),
]

descriptions = {
  "Electronics": "High-quality electronics product",
  "Appliances":  "Energy-efficient home appliance",
  "Tools":       "Professional-grade power tool",
  "Components":  "Industrial electrical component",
  "Accessories": "Everyday electrical accessory",
}

# ---------------------------
# Claims
# ---------------------------
claims = [
  # id,         dealer, amount,  status,     type,            submitted,    resolved
  ("CLM00001", "D001",  15000,  "Pending",  "Warranty",      "2025-01-06", None),
  ("CLM00002", "D002",  42500,  "Approved", "Return",        "2024-12-11", "2024-12-20"),
  ("CLM00003", "D003",   8200,  "Rejected", "Damage",        "2024-11-28", "2024-12-05"),
  ("CLM00004", "D004",  67000,  "Pending",  "Quality Issue", "2025-01-14", None),
  ("CLM00005", "D001",  23900,  "Approved", "Warranty",      "2024-10-02", "2024-10-19"),
  ("CLM00006", "D005",   5000,  "Pending",  "Return",        "2025-01-20", None),
  ("CLM00007", "D002",  98000,  "Rejected", "Quality Issue", "2024-09-15", "2024-10-01"),
  ("CLM00008", "D003",  31250,  "Approved", "Damage",        "2024-12-30", "2025-01-08"),
]

# ---------------------------
# Sales
# ---------------------------
sales = [
  # id,         dealer, sku,        qty, amount,  date,         region,      zone
  ("SAL00001", "D001", "SKU00001",   4,  74000, "2025-01-18", "Chennai",   "South"),
  ("SAL00002", "D002", "SKU00003",  10,  74990, "2025-01-17", "Mumbai",    "West"),
  ("SAL00003", "D003", "SKU00004",  20,  53000, "2025-01-15", "Delhi",     "North"),
  ("SAL00004", "D004", "SKU00005",  12,  17400, "2025-01-12", "Bangalore", "South"),
  ("SAL00005", "D005", "SKU00006",   6,  29994, "2025-01-09", "Kolkata",   "East"),
  ("SAL00006", "D001", "SKU00002",  15,  48000, "2024-12-28", "Chennai",   "South"),
  ("SAL00007", "D002", "SKU00010",   2,  22500, "2024-12-21", "Mumbai",    "West"),
  ("SAL00008", "D003", "SKU00009",  40,  35960, "2024-12-14", "Delhi",     "North"),
  ("SAL00009", "D004", "SKU00001",   3,  55500, "2024-11-30", "Bangalore", "South"),
  ("SAL00010", "D001", "SKU00012", 200,  30000, "2024-11-22", "Chennai",   "South"),
]

def demo_records() -> Dict[str, List[Dict[str, Any]]]:
    """All fixtures as validated row dicts, keyed by record kind."""
    dealer_names = {d[0]: d[1] for d in dealers}
    sku_names = {s[0]: s[1] for s in skus}

    raw = {
        "dealers": [
            dict(id=i, name=n, region=r, zone=z, city=c, contact=ct,
                 status=(rest[0] if rest else "Active"))
            for (i, n, r, z, c, ct, *rest) in dealers
        ],
        "skus": [
            dict(id=i, name=n, category=cat, zone=z, warehouse=w, stock=st, price=p,
                 description=descriptions[cat])
            for (i, n, cat, z, w, st, p) in skus
        ],
        "claims": [
            dict(id=i, dealer_id=d, dealer_name=dealer_names[d], amount=a, status=s,
                 type=t, submitted_date=sub, resolved_date=res)
            for (i, d, a, s, t, sub, res) in claims
        ],
        "sales": [
            dict(id=i, dealer_id=d, dealer_name=dealer_names[d], sku_id=k,
                 sku_name=sku_names[k], quantity=q, amount=a, date=day, region=r, zone=z)
            for (i, d, k, q, a, day, r, z) in sales
        ],
    }
    return {
        kind: [as_row(RECORD_MODELS[kind](**row)) for row in rows]
        for kind, rows in raw.items()
    }

def seed(engine: Engine) -> Dict[str, int]:
    init_db(engine)
    counts = {}
    with engine.begin() as conn:
        for kind, rows in demo_records().items():
            table = TABLES[kind]
            conn.execute(table.delete().where(table.c.id.in_([r["id"] for r in rows])))
            conn.execute(table.insert(), rows)
            counts[kind] = len(rows)
    return counts

if __name__ == "__main__":
    logging.basicConfig(level="INFO", format="%(asctime)s %(levelname)s [seed] %(message)s")
    ensure_dirs()
    done = seed(make_engine(DATABASE_URL))
    log.info("Seeded %s", done)
