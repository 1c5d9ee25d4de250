# Keyword-based query understanding.
# Tables are data: adding a category means adding an entry, not a branch.

from __future__ import annotations
from typing import Dict, Optional, Tuple

from .types import QueryType


# Checked in order; the first set with a hit wins.
QUERY_TYPE_KEYWORDS: Tuple[Tuple[QueryType, Tuple[str, ...]], ...] = (
    (QueryType.TREATMENT, (
        "treatment", "therapy", "drug", "medication", "chemo", "chemotherapy",
        "radiation", "surgery", "regimen", "folfox", "folfiri", "capox",
        "bevacizumab", "cetuximab", "immunotherapy", "targeted therapy",
        "first line", "second line", "1st line", "2nd line", "adjuvant",
        "neoadjuvant", "maintenance", "what drugs", "which treatment",
    )),
    (QueryType.SIDE_EFFECT, (
        "side effect", "adverse", "symptom", "nausea", "fatigue", "tired",
        "pain", "hair loss", "diarrhea", "vomiting", "neuropathy", "numbness",
        "tingling", "cold sensitivity", "mouth sores", "appetite", "weight",
        "infection", "fever", "blood count", "neutropenia", "manage", "cope",
        "deal with", "help with",
    )),
    (QueryType.PROGNOSIS, (
        "prognosis", "survival", "outcome", "chance", "cure", "remission",
        "recurrence", "come back", "spread", "metastasis", "metastatic",
        "life expectancy", "how long", "statistics", "odds", "likelihood",
    )),
    (QueryType.DIAGNOSIS, (
        "diagnos", "test", "scan", "ct", "mri", "pet", "colonoscopy",
        "biopsy", "marker", "genetic", "mutation", "kras", "braf", "msi",
        "cea", "stage", "staging", "what does", "mean", "results",
    )),
    (QueryType.SCREENING, (
        "screen", "prevention", "prevent", "risk", "family history",
        "hereditary", "lynch", "when should", "how often", "check",
    )),
)

# Extra terms for the second retrieval strategy. GENERAL has none.
EXPANSION_TERMS: Dict[QueryType, str] = {
    QueryType.TREATMENT: "chemotherapy regimen FOLFOX FOLFIRI treatment protocol",
    QueryType.SIDE_EFFECT: "adverse effects toxicity side effects management symptoms",
    QueryType.PROGNOSIS: "survival outcome prognosis stage recurrence",
    QueryType.DIAGNOSIS: "staging diagnosis biomarker testing CEA",
    QueryType.SCREENING: "screening colonoscopy prevention early detection",
}


def classify_query_type(query: str) -> QueryType:
    """
    Return the intent of a question.
    Plain substring matching on the lower-cased text, so "ct" also hits
    inside "effect". Priority order is the order of QUERY_TYPE_KEYWORDS.
    """
    lowered = (query or "").lower()
    for query_type, keywords in QUERY_TYPE_KEYWORDS:
        if any(kw in lowered for kw in keywords):
            return query_type
    return QueryType.GENERAL


def expansion_for(query_type) -> Optional[str]:
    return EXPANSION_TERMS.get(QueryType.normalize(query_type))
