"""
Basic Usage Example for the Complaint Reconciliation Pipeline
"""

from complaint_pipeline import Config, ReconciliationPipeline, make_complaint_sample
from complaint_pipeline.reporting import save_audit, save_features

# Generate sample data in the published layout
sample = make_complaint_sample(500, random_state=42)

# Basic configuration
config = Config(
    reference_date=sample.reference_date,
    window_years=10,
    output_folder='outputs_example'
)

# Run pipeline
pipeline = ReconciliationPipeline(config)
features = pipeline.run(**sample.tables())

# Export results
save_features(features, config.output_folder)
save_audit(pipeline.audit_, config.output_folder)
print(features.head())
print("Pipeline completed! Check 'outputs_example' folder for results.")
