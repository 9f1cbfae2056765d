DISCLAIMER = (
    "These figures are point-in-time estimates built from published VA, FHA and "
    "conventional pricing grids. They are not a loan offer or a credit decision; "
    "lender overlays, appraisal results and underwriter review prevail."
)

# VA qualification policy
VA_DTI_GUIDELINE = 0.41
RESIDUAL_ENHANCEMENT = 1.2
LIVING_EXPENSE_SHARE = 0.40
ELIGIBLE_SERVICE_STATUSES = frozenset(
    {"veteran", "active-duty", "national-guard", "reserve", "surviving-spouse"}
)

# Conventional PMI
PMI_LTV_THRESHOLD = 80.0
PMI_SCHEDULED_DROP_LTV = 0.78
PMI_REQUESTED_DROP_LTV = 0.80
PMI_PRINCIPAL_SHARE = 0.30
PMI_MAX_MONTHS = 360

# FHA
FHA_LIFE_OF_LOAN_TERM = 30
FHA_LIFE_OF_LOAN_LTV = 90.0
FHA_CANCEL_LIFE = "Life of loan"
FHA_CANCEL_11_YEARS = "11 years"

# Max price search
MAX_PRICE_LOW = 100000
MAX_PRICE_HIGH = 2000000
MAX_PRICE_ITERATIONS = 50

# Reference-data fallbacks
DEFAULT_PROPERTY_TAX_RATE = 0.01
DEFAULT_PMI_RATE = 0.005
DEFAULT_RESIDUAL_INCOME = 1000.0
DEFAULT_REGION = "South"
