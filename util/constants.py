from typing import Final

LOCAL_AUTHOR_ID: Final[str] = "local"


class InternalURIs:
    API = "/api"
    V1 = API + "/v1"
    QUERY_NOTES = V1 + "/notes/query"
    UPSERT_NOTE = V1 + "/notes/upsert"
    DELETE_NOTE = V1 + "/notes/delete"
    QUERY_INDEX = V1 + "/index/query"


class ExternalURIs:
    SUPABASE_REST = "/rest/v1"
    SUPABASE_FUNCTIONS = "/functions/v1"
