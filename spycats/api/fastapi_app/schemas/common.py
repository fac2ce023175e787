from pydantic import BaseModel


class MessageOut(BaseModel):
    message: str


class ErrorOut(BaseModel):
    error: str


ERROR_RESPONSES = {
    400: {"model": ErrorOut, "description": "Requête invalide ou règle métier violée"},
    404: {"model": ErrorOut, "description": "Ressource introuvable"},
    500: {"model": ErrorOut, "description": "Erreur de persistance"},
}
