"""
StudyPlan API: study plan generation and weekly scheduling over HTTP.
"""
