"""
Field catalogue for the commercial lease abstract.

Formatting conventions are carried in the field descriptions so they reach the
model through the structured output schema.
"""

from __future__ import annotations

from .schema import SchemaNode, array, obj, string

DATE = "Date formatted MM/DD/YYYY"
CURRENCY = "Currency formatted $XXX,XXX.XX"
SQUARE_FEET = "Square footage, numeric with commas"
CITATION = "Source citation: document name, section number and page number"
PERCENT = "Percentage, e.g. 12.5%"


def _address(key: str, *extra: SchemaNode) -> SchemaNode:
    return obj(
        key,
        string("name"),
        string("atten", "Attention line"),
        string("address"),
        string("city"),
        string("state"),
        string("zipCode"),
        string("email"),
        *extra,
    )


def _clause(key: str, description: str) -> SchemaNode:
    return obj(
        key,
        string("leaseSectionAndPage", CITATION),
        string("notes", "Full verbatim clause text, including conditions and remedies"),
        description=description,
    )


GENERAL_INFORMATION = obj(
    "generalInformation",
    string("tenantName"),
    string("dba", "Doing-business-as name"),
    string("suiteNumber"),
    string("buildingNumber"),
    string("storeNumber"),
    string("shoppingCenterName"),
    string("shoppingCenterAddress"),
    string("premisesGLA", f"Gross leasable area. {SQUARE_FEET}"),
    string("guarantors"),
    string("areSpousesGuarantors"),
    string("isGuaranteeSeparate", "Whether the guaranty is a separate document"),
)

LEASE_AMENDMENTS_REVIEWED = array(
    "leaseAmendmentsReviewed",
    string("dateOfDocument", DATE),
    string("documentReviewed", "Document name, e.g. Original Lease, First Amendment"),
    string("leaseSectionAndPage", CITATION),
    string("issues", "Issues or inconsistencies noted in this document"),
    description="One entry per document reviewed, in chronological order",
)

LEASE_TERM_AND_DATES = obj(
    "leaseTermAndDates",
    string("leaseTerm"),
    string("leaseSectionAndPage", CITATION),
    string("leaseExecutionDate", DATE),
    string("deliveryDate", DATE),
    string("leaseCommencementDate", DATE),
    string("openDate", DATE),
    string("rentCommencementDate", DATE),
    string("leaseExpirationDate", DATE),
)

NOTICE_ADDRESSES = obj(
    "noticeAddresses",
    string("leaseSectionAndPage", CITATION),
    _address("tenant"),
    _address("tenantsLawyer"),
    _address("franchisor", string("leaseAddressType")),
)

BILLING_AND_CHARGES = obj(
    "billingAndCharges",
    string("leaseSectionAndPage", CITATION),
    array(
        "baseRentSchedule",
        string("sourceDocument", "Document defining this schedule, e.g. Original Lease"),
        string("incomeCategory"),
        string("effectiveDate", DATE),
        string("endDate", DATE),
        string("annualAmountPerSf", CURRENCY),
        string("annualTotal", CURRENCY),
        string("monthlyAmount", CURRENCY),
        description="Every rent schedule defined across all documents",
    ),
    string("camTaxInsuranceFirstYear", CURRENCY),
    obj(
        "percentageRent",
        string("leaseSectionAndPage", CITATION),
        string("reportingFrequency"),
        string("naturalBreakpoint", CURRENCY),
        string("unnaturalBreakpoint", CURRENCY),
        string("salesYearEnd", DATE),
        string("billingFrequency"),
    ),
)

KEY_CLAUSES = obj(
    "keyClauses",
    _clause("cotenancyRequirements", "Co-tenancy requirements and remedies"),
    _clause("landlordKickout", "Landlord right to terminate"),
    _clause("tenantKickout", "Tenant right to terminate, e.g. sales kickout"),
    _clause("tenantGoDark", "Tenant right to cease operating"),
    _clause("landlordRestrictions", "Restrictions on the landlord, e.g. exclusives"),
    _clause("assignmentAndSubletting", "Assignment and subletting"),
    _clause("shoppingCenterAlterations", "Shopping center alterations, no-build areas"),
    _clause("operatingCovenant", "Operating covenant and hours"),
    _clause("lateChargesNSFFee", "Late charges and NSF fees"),
    _clause("defaultClause", "Events of default and cure periods"),
    _clause("guaranty", "Guaranty"),
    _clause("purchaseOptionROFR", "Purchase option or right of first refusal"),
    _clause("marketingOrPromotionalFee", "Marketing or promotional fund fees"),
    _clause("holdoverTerms", "Holdover terms"),
    _clause("signage", "Signage rights"),
    _clause("estoppel", "Estoppel certificate requirements"),
    _clause("eminentDomainAndSubordination", "Eminent domain and subordination"),
    _clause("damageOrDestruction", "Damage or destruction"),
    _clause("relocationRight", "Landlord relocation right"),
    array(
        "additionalNotes",
        string("leaseSectionAndPage", CITATION),
        string("reference", "Clause or topic name"),
        string("notes", "Full verbatim text"),
        description="Significant clauses not covered by any other key clause",
        catch_all=True,
    ),
    granularity="expand",
)

MAINTENANCE_AND_REIMBURSEMENT = obj(
    "maintenanceAndReimbursement",
    string("hvac", "HVAC maintenance and replacement responsibility"),
    string("tenantAllowance", CURRENCY),
    obj(
        "cam",
        string("leaseSectionAndPage", CITATION),
        string("prorataSharePercent", PERCENT),
        string("exclusions"),
        string("paymentTerms"),
        string("capitalRepairs"),
        string("auditRight"),
        string("adminFeeAllowedInCAM"),
        string("propertyManagementFeeAllowedInCAM"),
    ),
    obj(
        "realEstateTaxes",
        string("leaseSectionAndPage", CITATION),
        string("prorataSharePercent", PERCENT),
        string("paymentTerms"),
        string("appealRight"),
        string("tenantPaysForAssessments"),
    ),
    obj(
        "insurance",
        string("leaseSectionAndPage", CITATION),
        string("insuranceReimbursed"),
        string("tenantPaysDeductible"),
        string("prorataSharePercent", PERCENT),
        string("rightToSelfInsure"),
    ),
)

TENANT_INSURANCE_INFORMATION = obj(
    "tenantInsuranceInformation",
    string("leaseSectionAndPage", CITATION),
    array(
        "coverages",
        string("type", "Coverage type, e.g. Commercial General Liability"),
        string("coverage", f"Required limits. {CURRENCY}"),
    ),
    string("deductibleRequirementInLease", CURRENCY),
    string("comments"),
)

LEASE_ABSTRACT_SCHEMA: SchemaNode = obj(
    "leaseAbstract",
    GENERAL_INFORMATION,
    LEASE_AMENDMENTS_REVIEWED,
    LEASE_TERM_AND_DATES,
    NOTICE_ADDRESSES,
    BILLING_AND_CHARGES,
    KEY_CLAUSES,
    MAINTENANCE_AND_REIMBURSEMENT,
    TENANT_INSURANCE_INFORMATION,
)
