"""
Services layer - Business logic goes here.
Keep services focused on one concern each (classification, lifecycle, storage, images).

DESIGN PRINCIPLE:
- Services contain business logic, NOT routes
- Classifier, workflow and dashboard functions are pure; only the report
  store and image service touch disk or Firestore
"""
