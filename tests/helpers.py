from InputParser import parse_schedule_plan
from TimestampOrdering import DataItem, DataItemRegistry, Transaction, TransactionRegistry

SAMPLE_INPUT = """A, B, C, D
t1, t2, t3, t4
8, 9, 1, 4
S1 - r1(A) w2(B) c1
S2 - w1(A) r2(B) r1(B) w2(B) r1(A) w3(B) w4(A) w2(B) c
"""


def make_items(ids="ABCD"):
    return DataItemRegistry([DataItem(item_id) for item_id in ids])


def make_transactions(timestamps=(8, 9, 1, 4)):
    return TransactionRegistry([Transaction(f"T{i}", ts) for i, ts in enumerate(timestamps, start=1)])


def plan(line):
    return parse_schedule_plan(line, 4)
