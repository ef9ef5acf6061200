SIX = 6
NINE = 9
ONE_MILLION = 1_000_000

QUOTE_PRECISION_EXP = SIX
QUOTE_PRECISION = 10**QUOTE_PRECISION_EXP
LAMPORTS_EXP = NINE
LAMPORTS_PRECISION = 10**LAMPORTS_EXP

PRICE_PRECISION = 10**10
MARK_PRICE_PRECISION = PRICE_PRECISION
PEG_PRECISION = 10**3
AMM_RESERVE_PRECISION = 10**13
BID_ASK_SPREAD_PRECISION = ONE_MILLION

PRICE_DIV_PEG = PRICE_PRECISION // PEG_PRECISION
AMM_TO_QUOTE_PRECISION_RATIO = AMM_RESERVE_PRECISION // QUOTE_PRECISION
AMM_TIMES_PEG_TO_QUOTE_PRECISION_RATIO = (
    AMM_RESERVE_PRECISION * PEG_PRECISION // QUOTE_PRECISION
)

# curve update policy
MAX_INVENTORY_SKEW = 5
MIN_SPREAD_SCALE = 1.05
MAX_TARGET_SPREAD = BID_ASK_SPREAD_PRECISION // 50  # 2%
K_SHRINK_NUMERATOR = 999
K_SHRINK_DENOMINATOR = 1_000
