SAMPLE_COMPARE_REQUEST = {
    "userInputs": {
        "age": 18,
        "startingSavings": 2000,
        "monthlyLifestyleCost": 1500,
        "riskTolerance": "medium",
    },
    "selectedPathIds": ["college_4yr_state", "trade_school_2yr", "military_gi_bill_college"],
    "horizonYears": 10,
}

SAMPLE_EVALUATE_REQUEST = {
    "userProfile": {
        "age": 18,
        "startingSavings": 2000,
        "monthlyLifestyleCost": 1500,
        "riskTolerance": "low",
        "structurePreference": 7,
        "creativityPreference": 4,
        "workLifeImportance": 8,
        "locationImportance": 5,
        "skillConfidence": 6,
        "interestAlignment": "high",
        "primaryInterest": "trades",
    },
    "paths": ["college_4yr_state", "trade_school_2yr", "apprenticeship", "work_now"],
    "preferenceWeights": {
        "financialWeight": 40,
        "lifestyleWeight": 30,
        "timeWeight": 20,
        "alignmentWeight": 10,
    },
}
