# Mappers turn validated DTOs into entity field assignments.  They never
# validate input themselves; the only failure they raise is
# ``UnknownReferenceError`` when a DTO points at a missing entity.
