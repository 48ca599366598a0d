"""
Constants for the calculator hub.

All monetary values in USD. Rates, multipliers and tier boundaries are
content constants taken from the calculator pages; they are not verified
against any authoritative source.
"""

import os

# ── Paths & web server ───────────────────────────────────────────────
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
CATALOG_PATH = os.path.join(BASE_DIR, "data", "calculator_list.txt")
REPORT_PATH = "calculator_report.pdf"
WEB_HOST = "127.0.0.1"
WEB_PORT = 5000

INF = float("inf")

# Relative tolerance for the total == combined(components) check
RESULT_TOLERANCE = 1e-6

# ── Pet boarding ─────────────────────────────────────────────────────
BOARDING_BASE_RATES = {            # per night
    "traditional-kennel": 40,
    "veterinary": 35,
    "luxury-hotel": 110,
    "daycare-overnight": 65,
    "pet-sitter-home": 45,
    "in-home-sitter": 55,
}
BOARDING_FACILITY_NAMES = {
    "traditional-kennel": "Traditional Kennel",
    "veterinary": "Veterinary Boarding",
    "luxury-hotel": "Luxury Pet Hotel",
    "daycare-overnight": "Doggy Daycare with Overnight",
    "pet-sitter-home": "Pet Sitter's Home",
    "in-home-sitter": "In-Home Pet Sitter",
}
BOARDING_DOG_SIZE_MULTIPLIERS = {
    "small": 1.0,
    "medium": 1.15,
    "large": 1.35,
    "extra-large": 1.6,
}
BOARDING_CAT_MULTIPLIER = 0.75
BOARDING_OTHER_MULTIPLIER = 0.8
BOARDING_LOCATION_MULTIPLIERS = {
    "urban": 1.3,
    "suburban": 1.0,
    "rural": 0.85,
}
BOARDING_HOLIDAY_PREMIUM = 0.35
BOARDING_DAILY_ADDONS = {          # per day
    "medication": 10,
    "playtime": 15,
    "webcam": 5,
    "training": 25,
}
BOARDING_ONE_TIME_ADDONS = {       # once per stay
    "grooming": 35,
}
BOARDING_MULTI_PET_DISCOUNT = 0.15
BOARDING_EXTENDED_STAYS = [3, 7, 14, 30]
BOARDING_BUDGET_OPTIONS = {
    "economy": "traditional-kennel",
    "standard": "daycare-overnight",
    "premium": "luxury-hotel",
}

# Duration discount: (lower, upper, label, daily multiplier); lower inclusive
BOARDING_DISCOUNT_TIERS = [
    (-INF, 7, "No discount", 1.00),
    (7, 14, "Weekly (7%)", 0.93),
    (14, 30, "Two-week (12%)", 0.88),
    (30, INF, "Monthly (18%)", 0.82),
]

# ── Passer rating ────────────────────────────────────────────────────
PASSER_COMPONENT_MAX = 2.375
PASSER_COMPLETION_BASE = 0.3
PASSER_COMPLETION_FACTOR = 5
PASSER_YARDS_BASE = 3
PASSER_YARDS_FACTOR = 0.25
PASSER_TD_FACTOR = 20
PASSER_INT_FACTOR = 25
PASSER_PERFECT_RATING = 158.3
PASSER_MAX_YARDS = 10_000          # per line; a full season record is under 6,000

# Minimum per-attempt rates that max out every component
PASSER_PERFECT_COMPLETION_RATE = 0.775
PASSER_PERFECT_YARDS_PER_ATTEMPT = 12.5
PASSER_PERFECT_TD_RATE = 0.11875

NCAA_YARDS_WEIGHT = 8.4
NCAA_TD_WEIGHT = 330
NCAA_COMPLETION_WEIGHT = 100
NCAA_INT_WEIGHT = -200

NFL_GRADE_TIERS = [
    (-INF, 70, "Poor", 0),
    (70, 80, "Below Average", 0),
    (80, 90, "Average", 0),
    (90, 100, "Above Average", 0),
    (100, 110, "Very Good", 0),
    (110, 120, "Excellent", 0),
    (120, 158.3, "Elite", 0),
    (158.3, INF, "Perfect", 0),
]
NCAA_GRADE_TIERS = [
    (-INF, 80, "Below Average", 0),
    (80, 100, "Average", 0),
    (100, 120, "Good", 0),
    (120, 150, "Very Good", 0),
    (150, 200, "Excellent", 0),
    (200, INF, "Elite", 0),
]

# ── Days on market ───────────────────────────────────────────────────
DOM_RELIST_RESET_DAYS = 45
DOM_MAX_LISTINGS = 5
DOM_MARKET_TIERS = [
    (-INF, 30, "Hot Market", 0),
    (30, 60, "Balanced Market", 0),
    (60, 90, "Slow Market", 0),
    (90, INF, "Cold Market", 0),
]
DOM_MARKET_DESCRIPTIONS = {
    "Hot Market": "Properties selling very quickly. High demand, low inventory.",
    "Balanced Market": "Normal market conditions. Properties selling at average pace.",
    "Slow Market": "Properties taking longer to sell. More negotiating power for buyers.",
    "Cold Market": "Properties sitting for extended periods. Consider price adjustments.",
}
# Property DOM divided by market average DOM; upper bound inclusive
DOM_PRICING_TIERS = [
    (-INF, 0.5, "Property may be underpriced - could increase 3-5%", 0.03),
    (0.5, 1.2, "Pricing appears appropriate for market", 0.0),
    (1.2, 1.5, "Consider reducing price by 3-5%", -0.03),
    (1.5, INF, "Consider reducing price by 5-10%", -0.05),
]

# ── Tire life ────────────────────────────────────────────────────────
TIRE_MIN_SAFE_DEPTH = 2            # 32nds of an inch
TIRE_UTQG_BASELINE_MILES = 25_000  # per 100 treadwear points
TIRE_DRIVING_STYLE = {"gentle": 1.15, "normal": 1.0, "aggressive": 0.80}
TIRE_ROAD_TYPE = {"highway": 1.10, "mixed": 1.0, "city": 0.95, "offroad": 0.75}
TIRE_CLIMATE = {"cold": 1.0, "moderate": 1.0, "hot": 0.90, "extreme": 0.85}
TIRE_ALIGNMENT = {"good": 1.0, "fair": 0.90, "poor": 0.75, "unknown": 0.85}
TIRE_PRESSURE_CHECK = {"weekly": 1.05, "monthly": 1.0, "rarely": 0.90, "never": 0.80}
TIRE_ROTATION_OVERDUE_FACTOR = 1.5
TIRE_ROTATION_OVERDUE_MULTIPLIER = 0.90

TIRE_ALIGNMENT_PENALTY = {"good": 0, "fair": 15, "poor": 30, "unknown": 10}
TIRE_PRESSURE_PENALTY = {"weekly": 0, "monthly": 0, "rarely": 15, "never": 30}
TIRE_ROTATION_PENALTY = 20
TIRE_AGE_WARNING_YEARS = 6
TIRE_AGE_SEVERE_YEARS = 8
TIRE_AGE_REPLACE_YEARS = 10
TIRE_HIGH_COST_PER_MILE = 0.05
TIRE_REPLACE_SOON_DEPTH = 4
TIRE_MONITOR_DEPTH = 6
TIRE_REPLACE_SOON_MILES = 5000
TIRE_MONITOR_MILES = 15000
TIRE_SET_SIZE = 4

TIRE_SCORE_TIERS = [
    (-INF, 40, "Poor", 0),
    (40, 60, "Fair", 0),
    (60, 80, "Good", 0),
    (80, INF, "Excellent", 0),
]

# ── Mortgage ─────────────────────────────────────────────────────────
MORTGAGE_MAX_RATE = 20.0
MORTGAGE_PMI_DOWN_PAYMENT_PCT = 20.0
MORTGAGE_SCHEDULE_PREVIEW_MONTHS = 12
MORTGAGE_STRESS_RATE_BUMPS = [1.0, 2.0]
MORTGAGE_COMPARISON_TERM_YEARS = 15
MORTGAGE_FRONT_END_LIMIT = 28      # payment-to-income %
MORTGAGE_BACK_END_LIMIT = 36       # debt-to-income %
MORTGAGE_GOOD_CREDIT = 740

# Debt-to-income %; upper bound inclusive
MORTGAGE_RISK_TIERS = [
    (-INF, 35, "low", 0),
    (35, 43, "moderate", 0),
    (43, INF, "high", 0),
]

# Affordability score (0-100); lower bound inclusive
MORTGAGE_AFFORDABILITY_TIERS = [
    (-INF, 40, "Poor", 0),
    (40, 60, "Fair", 0),
    (60, 80, "Good", 0),
    (80, INF, "Excellent", 0),
]

# ── Loan payment ─────────────────────────────────────────────────────
LOAN_MAX_RATE = 50.0
LOAN_EXTRA_MONTHS_CAP = 120        # schedule stops at term + this
LOAN_PAID_OFF_EPSILON = 0.01
LOAN_BIWEEKLY_PERIODS = 26
LOAN_COMPARISON_TERM_YEARS = 15
LOAN_AFFORDABLE_PAYMENT_SHARE = 0.28   # of gross monthly income
LOAN_RECOMMENDED_INCOME_MULTIPLE = 3

# Debt-to-income %; upper bound inclusive
LOAN_RISK_TIERS = [
    (-INF, 28, "low", 0),
    (28, 36, "moderate", 0),
    (36, 43, "high", 0),
    (43, INF, "very-high", 0),
]

# ── Compound interest ────────────────────────────────────────────────
COMPOUND_MAX_RATE = 50.0           # % either side of zero
COMPOUND_MAX_YEARS = 100
COMPOUND_PERIODS = {"daily": 365, "monthly": 12, "quarterly": 4, "annually": 1}
COMPOUND_FREQUENCIES = ("daily", "monthly", "quarterly", "annually", "continuous")
COMPOUND_SAFE_WITHDRAWAL_RATE = 0.04
# Share of the tax rate applied at withdrawal; taxable accounts pay
# long-term capital gains rather than income tax.
COMPOUND_ACCOUNT_TAX_SHARE = {"taxable": 0.15, "401k": 1.0, "ira": 1.0, "roth_ira": 0.0}
COMPOUND_ACCOUNT_NAMES = {
    "taxable": "Taxable brokerage",
    "401k": "401(k)",
    "ira": "Traditional IRA",
    "roth_ira": "Roth IRA",
}
# Annual return (mean, volatility) per risk tolerance
COMPOUND_MARKET_SCENARIOS = {
    "conservative": (0.04, 0.05),
    "moderate": (0.07, 0.12),
    "aggressive": (0.10, 0.18),
}
COMPOUND_RETURN_CLIP = (-0.50, 0.60)
COMPOUND_SIMULATIONS = 1000
COMPOUND_SEED = 42

# ── BMI ──────────────────────────────────────────────────────────────
KG_PER_LB = 0.453592
M_PER_INCH = 0.0254
BMI_MAX_FEET = 10
BMI_MAX_POUNDS = 1000
BMI_MAX_CM = 300
BMI_MAX_KG = 450
BMI_TIERS = [
    (-INF, 18.5, "Underweight", 0),
    (18.5, 25, "Normal weight", 0),
    (25, 30, "Overweight", 0),
    (30, INF, "Obese", 0),
]
BMI_HEALTH_RISK = {
    "Underweight": "Increased risk of malnutrition, osteoporosis, and decreased immunity",
    "Normal weight": "Lowest risk of weight-related health problems",
    "Overweight": "Increased risk of heart disease, diabetes, and high blood pressure",
    "Obese": "High risk of serious health conditions including diabetes, heart disease, and stroke",
}
BMI_RECOMMENDATIONS = {
    "Underweight": [
        "Consult with a healthcare provider or nutritionist",
        "Focus on nutrient-dense, calorie-rich foods",
        "Consider strength training to build muscle mass",
    ],
    "Normal weight": [
        "Maintain current lifestyle with balanced diet",
        "Continue regular physical activity",
        "Monitor weight periodically",
    ],
    "Overweight": [
        "Aim for gradual weight loss of 1-2 pounds per week",
        "Increase physical activity to 150+ minutes per week",
        "Focus on portion control and balanced nutrition",
    ],
    "Obese": [
        "Strongly consider consulting with healthcare providers",
        "Develop a comprehensive weight management plan",
        "Focus on sustainable lifestyle changes",
    ],
}

# ── Catalog ──────────────────────────────────────────────────────────
CATALOG_CALCULATOR_SUFFIX = "Calculator"
CATALOG_POPULAR_LIMIT = 20

POPULAR_CALCULATORS = [
    "Mortgage Payment Calculator",
    "BMI Calculator",
    "Loan Payment Calculator",
    "Percentage Calculator",
    "Tip Calculator",
    "Compound Interest Calculator",
    "Calorie Calculator",
    "GPA Calculator",
    "Age Calculator",
    "Discount Calculator",
    "Investment Return Calculator",
    "Retirement Savings Calculator",
    "401(k) Calculator",
    "Budget Calculator",
    "Savings Goal Calculator",
    "Final Grade Calculator",
    "Target Heart Rate Calculator",
    "Running Pace Calculator",
    "Real Estate Investment Calculator",
    "Concrete Calculator",
    "Car Payment Calculator",
    "Gas Mileage Calculator",
    "NFL Passer Rating Calculator",
    "Pet Boarding Cost Calculator",
]

# Ordered (keyword, value) tables; first keyword contained in the
# lower-cased name wins.
CATALOG_DIFFICULTY_RULES = [
    ("advanced", "advanced"),
    ("complex", "advanced"),
    ("professional", "advanced"),
    ("amortization", "intermediate"),
    ("analysis", "intermediate"),
    ("optimization", "intermediate"),
    ("valuation", "intermediate"),
    ("forecasting", "intermediate"),
    ("modeling", "intermediate"),
]
CATALOG_DEFAULT_DIFFICULTY = "basic"

CATALOG_DESCRIPTION_RULES = [
    ("mortgage", "Calculate mortgage payments and costs"),
    ("loan", "Calculate loan payments and terms"),
    ("payment", "Calculate monthly payments and costs"),
    ("interest", "Calculate interest rates and earnings"),
    ("budget", "Plan and track your budget"),
    ("savings", "Calculate savings goals and growth"),
    ("investment", "Analyze investment returns and performance"),
    ("tax", "Calculate taxes and deductions"),
    ("insurance", "Estimate insurance costs and coverage"),
    ("gpa", "Calculate academic performance"),
    ("grade", "Calculate grades and scores"),
    ("bmi", "Calculate body mass index"),
    ("calorie", "Calculate calorie needs and intake"),
    ("paint", "Calculate paint and coverage needs"),
    ("flooring", "Calculate flooring materials"),
    ("roofing", "Calculate roofing materials"),
    ("tire", "Estimate tire wear and replacement timing"),
    ("car", "Calculate vehicle costs and expenses"),
    ("fuel", "Calculate fuel costs and efficiency"),
    ("boarding", "Estimate pet boarding costs"),
    ("passer", "Rate quarterback passing performance"),
    ("market", "Measure how quickly properties sell"),
    ("percentage", "Calculate percentages and ratios"),
    ("area", "Calculate area and dimensions"),
    ("volume", "Calculate volume and capacity"),
]
# Formatted with the lower-cased calculator name
CATALOG_DEFAULT_DESCRIPTION = "Professional {name} calculations"

CATALOG_ICON_RULES = [
    ("finance", "DollarSign"),
    ("education", "GraduationCap"),
    ("health", "Heart"),
    ("real estate", "Home"),
    ("construction", "Hammer"),
    ("automotive", "Car"),
    ("business", "Briefcase"),
    ("mathematics", "Calculator"),
    ("pet", "Dog"),
    ("sports", "Trophy"),
    ("cooking", "ChefHat"),
    ("gardening", "Sprout"),
]
CATALOG_DEFAULT_ICON = "Calculator"

CATALOG_COLORS = [
    "from-blue-500 to-purple-600",
    "from-indigo-500 to-blue-600",
    "from-purple-500 to-indigo-600",
    "from-cyan-500 to-blue-600",
    "from-blue-600 to-indigo-700",
    "from-violet-500 to-purple-600",
    "from-pink-500 to-rose-600",
    "from-orange-500 to-red-600",
    "from-green-500 to-emerald-600",
    "from-teal-500 to-cyan-600",
    "from-yellow-500 to-orange-600",
    "from-rose-500 to-pink-600",
    "from-amber-500 to-yellow-600",
    "from-emerald-500 to-green-600",
    "from-sky-500 to-blue-600",
    "from-slate-500 to-gray-600",
    "from-lime-500 to-green-600",
]
