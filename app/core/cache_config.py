"""Cache configuration and TTL settings"""

# Cache TTL (Time To Live) configurations in seconds
CACHE_TTL = {
    "exam_questions": 300,       # 5 minutes
    "part_questions": 120,       # 2 minutes
}

# Cache key patterns
CACHE_KEYS = {
    "exam_questions": "exam:{}:questions",
    "part_questions": "exam:{}:part:{}:page:{}:limit:{}",
    "exam_pattern": "exam:{}:*",
    "all_exams_pattern": "exam:*",
}
