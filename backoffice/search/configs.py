from backoffice.core.constants import (
    ExistingVisa, WishedVisa, PropertyType, enum_values,
    EXISTING_VISA_LABELS, WISHED_VISA_LABELS, PROPERTY_TYPE_LABELS,
)
from backoffice.search.engine import EnumSearchField, SearchConfig

TIMESTAMP_SORT_FIELDS = ("created_at", "updated_at")

USER_SEARCH = SearchConfig(
    entity="user",
    text_fields=("name", "email"),
    filter_fields=("role", "is_active"),
    sort_fields=("id", "name", "email", "role", "is_active") + TIMESTAMP_SORT_FIELDS,
)

CLIENT_SEARCH = SearchConfig(
    entity="client",
    text_fields=(
        "name",
        "family_name",
        "email",
        "passport_number",
        "nationality",
        "father_name",
        "mother_name",
    ),
    filter_fields=(
        "nationality",
        "is_active",
        "created_by",
        "marital_status",
        "married_to_thai_and_registered",
        "has_yellow_or_pink_card",
        "has_bought_property_in_thailand",
    ),
    sort_fields=(
        "id",
        "name",
        "family_name",
        "email",
        "nationality",
        "date_of_birth",
        "age",
        "is_active",
    ) + TIMESTAMP_SORT_FIELDS,
)

# Visa search only looks at the two visa vocabularies
VISA_SEARCH = SearchConfig(
    entity="visa",
    enum_fields=(
        EnumSearchField("existing_visa", tuple(enum_values(ExistingVisa)), EXISTING_VISA_LABELS),
        EnumSearchField("wished_visa", tuple(enum_values(WishedVisa)), WISHED_VISA_LABELS),
    ),
    filter_fields=("client_id", "existing_visa", "wished_visa", "is_active", "created_by"),
    sort_fields=(
        "id",
        "client_id",
        "existing_visa",
        "wished_visa",
        "latest_entry_date",
        "existing_visa_expiry",
        "intended_departure_date",
        "created_by",
        "is_active",
    ) + TIMESTAMP_SORT_FIELDS,
)

PROPERTY_SEARCH = SearchConfig(
    entity="property",
    text_fields=(
        "property_name",
        "agent_name",
        "broker_company",
        "repair_details",
        "transaction_type",
    ),
    enum_fields=(
        EnumSearchField("property_type", tuple(enum_values(PropertyType)), PROPERTY_TYPE_LABELS),
    ),
    filter_fields=("client_id", "transaction_type", "property_type", "is_active", "created_by"),
    sort_fields=(
        "id",
        "property_name",
        "agent_name",
        "broker_company",
        "transaction_type",
        "property_type",
        "reservation_date",
        "selling_price",
        "deposit",
    ) + TIMESTAMP_SORT_FIELDS,
)
