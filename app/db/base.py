from sqlalchemy.orm import DeclarativeBase

# largest value an INTEGER primary or foreign key column holds
MAX_ID = 2**31 - 1


class Base(DeclarativeBase):
    pass
