"""
Sample EXPLAIN text used across the test suite.

Plans follow psql's layout: every line starts with a space and child
annotations are indented further under their node.
"""

# Single table, one filter column, low cost
SEQ_SCAN_PLAN = """\
                         QUERY PLAN
------------------------------------------------------------
 Seq Scan on users  (cost=0.00..425.50 rows=1000 width=100)
   Filter: (status = 'active'::text)
(2 rows)
"""

HASH_JOIN_PLAN = """\
                              QUERY PLAN
----------------------------------------------------------------------
 Hash Join  (cost=125.00..850.25 rows=10000 width=100)
   Hash Cond: (orders.user_id = users.id)
   ->  Seq Scan on orders  (cost=0.00..500.00 rows=20000 width=50)
   ->  Hash  (cost=100.00..100.00 rows=1000 width=50)
         ->  Seq Scan on users  (cost=0.00..100.00 rows=1000 width=50)
(5 rows)
"""

# Expensive filtered scan over a large table
LARGE_SCAN_PLAN = """\
 Seq Scan on events  (cost=0.00..12500.00 rows=250000 width=64)
   Filter: (kind = 'click'::text)
"""

PSQL_ERROR_OUTPUT = (
    'ERROR:  relation "missing_table" does not exist\n'
    "LINE 1: EXPLAIN SELECT * FROM missing_table;\n"
)
