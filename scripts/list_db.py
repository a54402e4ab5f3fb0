import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

import database

engine = database.configure()
ins = inspect(engine)
print('TABLES:', ins.get_table_names())
with database.session_scope() as s:
    for t in [table.name for table in database.Base.metadata.sorted_tables]:
        try:
            cnt = s.execute(text(f"SELECT count(*) FROM {t}")).scalar()
            print(f"{t}: {cnt}")
        except SQLAlchemyError as e:
            s.rollback()
            print(f"{t}: ERROR {e}")
