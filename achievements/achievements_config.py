ACHIEVEMENTS = {
    "Quiz Master": {
        "description": "Complete 10 quizzes",
        "badge_image": "🎓",
        "requirement": {"type": "quizzes_completed", "threshold": 10}
    },
    "Perfect Score": {
        "description": "Get 100% on any quiz",
        "badge_image": "⭐",
        "requirement": {"type": "perfect_scores", "threshold": 1}
    },
    "High Achiever": {
        "description": "Maintain an average score above 90%",
        "badge_image": "🏆",
        "requirement": {"type": "quiz_score", "threshold": 90}
    }
}
