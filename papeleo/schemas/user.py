from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    username: str | None = None
    signature: str | None = None


class DocumentData(BaseModel):
    """Contractor details written into the contract at signing time."""

    model_config = ConfigDict(populate_by_name=True)

    nombre: str | None = Field(None, alias="NOMBRE", max_length=255)
    telefono: str | None = Field(None, alias="TELEFONO", max_length=64)
    direccion: str | None = Field(None, alias="DIRECCIÓN", max_length=255)
    identificacion: str | None = Field(None, alias="IDENTIFICACIÓN", max_length=64)

    @property
    def is_complete(self) -> bool:
        return all(
            value and value.strip()
            for value in (self.nombre, self.telefono, self.direccion, self.identificacion)
        )


class DocumentDataResponse(BaseModel):
    data: DocumentData
    complete: bool
