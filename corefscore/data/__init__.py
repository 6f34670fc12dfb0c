from corefscore.data.documents import (
    Document,
    parse_document,
    read_document_lines,
    read_documents,
)
