from sqlmodel import SQLModel


class BaseModel(SQLModel):
    """Common base for all persisted domain entities"""
    pass
