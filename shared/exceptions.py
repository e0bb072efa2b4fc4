class NotFound(Exception):
    def __init__(self, name: str):
        self.name = name


class UnknownEntityType(Exception):
    def __init__(self, entity_type_id: str):
        self.entity_type_id = entity_type_id
        super().__init__(f"The '{entity_type_id}' entity type does not exist.")


class TeamMembershipError(Exception):
    """
    Falha ao consultar ou alterar os membros de uma equipe no serviço externo.
    """
