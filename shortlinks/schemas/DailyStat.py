import datetime as dt

from pydantic import BaseModel

class DailyStat(BaseModel):
    # serialized as "YYYY-MM-DD"
    date: dt.date
    count: int
