"""Utility for resolving client references to IDs."""

from freelancedesk.domain.client import ClientService


def resolve_client(client_service: ClientService, client: str | int) -> int:
    """Resolve a client ID, email or name to a client ID.

    Args:
        client_service: ClientService instance
        client: Client ID (int or numeric string), email, or exact name

    Returns:
        Client ID

    Raises:
        ValueError: If no client matches or a name matches several clients
    """
    if isinstance(client, int) or str(client).strip().isdigit():
        client_id = int(client)
        if client_service.get_client(client_id) is None:
            raise ValueError(f"Client ID {client_id} not found")
        return client_id

    reference = str(client).strip()
    clients = client_service.list_clients()

    if "@" in reference:
        for c in clients:
            if c.email == reference.lower():
                return c.id
        raise ValueError(f"Client '{reference}' not found")

    matches = [c for c in clients if c.name == reference]
    if not matches:
        matches = [c for c in clients if c.name.lower() == reference.lower()]
    if len(matches) > 1:
        ids = ", ".join(str(c.id) for c in matches)
        raise ValueError(f"Client name '{reference}' is ambiguous (IDs: {ids}); use the ID or email")
    if not matches:
        raise ValueError(f"Client '{reference}' not found")
    return matches[0].id
