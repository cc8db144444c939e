"""
Closed vocabularies used by the client, visa and property records.

Each enum stores its value in the database; ``*_LABELS`` maps the stored value
to the text shown in the back-office UI. Search matches a term against both.
"""

from enum import Enum
from typing import Dict, Type


class UserRole(str, Enum):
    admin = "admin"
    user = "user"


class MaritalStatus(str, Enum):
    single = "single"
    married = "married"
    common_law = "common_law"
    divorced = "divorced"
    widowed = "widowed"


class WishedVisa(str, Enum):
    renew_the_existing_one = "renew_the_existing_one"
    non_immigrant_o_visa_3_month = "non_immigrant_o_visa_3_month"
    married_to_thai_visa = "married_to_thai_visa"
    thai_child_visa = "thai_child_visa"
    student_visa_language_school = "student_visa_language_school"
    student_visa_school_or_university = "student_visa_school_or_university"
    retirement_visa = "retirement_visa"
    guardian_visa = "guardian_visa"
    dependent_visa = "dependent_visa"
    non_immigrant_b_visa_3_month = "non_immigrant_b_visa_3_month"
    business_visa_employment_1_year = "business_visa_employment_1_year"
    retirement_visa_1_year = "retirement_visa_1_year"
    non_immigrant_oa_visa = "non_immigrant_oa_visa"
    elite_visa = "elite_visa"
    dtv = "dtv"
    ltr_wealthy_pensioner = "ltr_wealthy_pensioner"
    ltr_wealthy_citizen = "ltr_wealthy_citizen"
    ltr_highly_skilled_professional = "ltr_highly_skilled_professional"
    ltr_work_from_thailand_professional = "ltr_work_from_thailand_professional"


class ExistingVisa(str, Enum):
    entry_stamp_30_day = "entry_stamp_30_day"
    entry_stamp_60_day = "entry_stamp_60_day"
    tourist_visa_60_day = "tourist_visa_60_day"
    non_immigrant_o_visa_3_month = "non_immigrant_o_visa_3_month"
    married_to_thai_visa = "married_to_thai_visa"
    thai_child_visa = "thai_child_visa"
    student_visa_language_school = "student_visa_language_school"
    student_visa_school_or_university = "student_visa_school_or_university"
    retirement_visa = "retirement_visa"
    guardian_visa = "guardian_visa"
    dependent_visa = "dependent_visa"
    non_immigrant_b_visa_3_month = "non_immigrant_b_visa_3_month"
    business_visa_employment_1_year = "business_visa_employment_1_year"
    retirement_visa_1_year = "retirement_visa_1_year"
    non_immigrant_oa_visa = "non_immigrant_oa_visa"
    elite_visa = "elite_visa"
    dtv = "dtv"
    ltr_wealthy_pensioner = "ltr_wealthy_pensioner"
    ltr_wealthy_citizen = "ltr_wealthy_citizen"
    ltr_highly_skilled_professional = "ltr_highly_skilled_professional"
    ltr_work_from_thailand_professional = "ltr_work_from_thailand_professional"


class PropertyType(str, Enum):
    house_and_land_freehold = "house_and_land_freehold"
    house_and_land_leasehold = "house_and_land_leasehold"
    condominium_freehold = "condominium_freehold"
    condominium_leasehold = "condominium_leasehold"
    empty_land = "empty_land"


class IntendedClosingDate(str, Enum):
    on_or_before = "on_or_before"
    any_date = "any_date"
    at_closing = "at_closing"
    after_closing = "after_closing"
    specific_date = "specific_date"


class HandoverDate(str, Enum):
    on_or_before = "on_or_before"
    at_closing = "at_closing"
    after_closing = "after_closing"


class PlaceOfPayment(str, Enum):
    thailand = "thailand"
    other = "other"


class PropertyCondition(str, Enum):
    new = "new"
    good_working = "good_working"
    as_seen = "as_seen"
    sometimes_items_to_be_repaired = "sometimes_items_to_be_repaired"


class HouseWarranty(str, Enum):
    yes = "yes"
    no = "no"


class FurnitureIncluded(str, Enum):
    not_furniture_included = "not_furniture_included"
    specific_furniture_included = "specific_furniture_included"
    all_furniture_included = "all_furniture_included"
    selected_furniture_included = "selected_furniture_included"
    all_furniture_except_personal_items = "all_furniture_except_personal_items"


class CostSharing(str, Enum):
    buyer_only = "buyer_only"
    seller_only = "seller_only"
    lessee_only = "lessee_only"
    lessor_only = "lessor_only"
    mortgagor_only = "mortgagor_only"
    mortgagee_only = "mortgagee_only"
    usufructuary_only = "usufructuary_only"
    owner_only = "owner_only"
    dominant_owner_only = "dominant_owner_only"
    servient_owner_only = "servient_owner_only"
    share_50_50 = "share_50_50"


class HouseTitle(str, Enum):
    building_permit = "building_permit"
    official_house_sale_and_purchase_agreement = "official_house_sale_and_purchase_agreement"


class LandTitle(str, Enum):
    land_title_deed = "land_title_deed"
    certificate_of_utilization = "certificate_of_utilization"


class DeclaredLandOfficePrice(str, Enum):
    actual_price = "actual_price"
    lowest_possible_price = "lowest_possible_price"
    mediocre_price = "mediocre_price"


# Suggested transaction types; the column itself is free text.
TRANSACTION_TYPES = [
    "buy",
    "sell",
    "rent",
    "sublease",
    "mortgage",
    "construction",
    "joint_venture",
    "consultant_from_owner",
    "consultant_from_buyer",
]

WISHED_VISA_LABELS: Dict[str, str] = {
    "renew_the_existing_one": "Renew the Existing One",
    "non_immigrant_o_visa_3_month": "Non-Immigrant O Visa (3 Month)",
    "married_to_thai_visa": "Married to Thai Visa",
    "thai_child_visa": "Thai Child Visa",
    "student_visa_language_school": "Student Visa (Language School)",
    "student_visa_school_or_university": "Student Visa (School or University)",
    "retirement_visa": "Retirement Visa",
    "guardian_visa": "Guardian Visa",
    "dependent_visa": "Dependent Visa",
    "non_immigrant_b_visa_3_month": "Non-Immigrant B Visa (3 Month)",
    "business_visa_employment_1_year": "Business Visa Employment (1 Year)",
    "retirement_visa_1_year": "Retirement Visa (1 Year)",
    "non_immigrant_oa_visa": "Non-Immigrant OA Visa",
    "elite_visa": "Elite Visa",
    "dtv": "DTV",
    "ltr_wealthy_pensioner": "LTR: Wealthy Pensioner",
    "ltr_wealthy_citizen": "LTR: Wealthy Citizen",
    "ltr_highly_skilled_professional": "LTR: Highly Skilled/Professional",
    "ltr_work_from_thailand_professional": "LTR: Work from Thailand Professional",
}

EXISTING_VISA_LABELS: Dict[str, str] = {
    "entry_stamp_30_day": "Entry Stamp (30 Day)",
    "entry_stamp_60_day": "Entry Stamp (60 Day)",
    "tourist_visa_60_day": "Tourist Visa (60 Day)",
    **{
        value: label
        for value, label in WISHED_VISA_LABELS.items()
        if value != "renew_the_existing_one"
    },
}

PROPERTY_TYPE_LABELS: Dict[str, str] = {
    "house_and_land_freehold": "House and Land (Freehold)",
    "house_and_land_leasehold": "House and Land (Leasehold)",
    "condominium_freehold": "Condominium (Freehold)",
    "condominium_leasehold": "Condominium (Leasehold)",
    "empty_land": "Empty Land",
}


def get_label(labels: Dict[str, str], value: str) -> str:
    """Display label for a stored enum value, falling back to the value itself."""
    return labels.get(value, value)


def enum_values(enum_cls: Type[Enum]) -> list:
    return [member.value for member in enum_cls]


# Document fields a property can carry, each backed by one uploaded file
PROPERTY_DOCUMENT_FIELDS = [
    "land_title_document",
    "house_title_document",
    "house_registration_book",
    "land_lease_agreement",
]

ALLOWED_DOCUMENT_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/tiff",
    "image/bmp",
    "text/plain",
}

ALLOWED_IMAGE_MIME_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
}
