from reliefrank.feature_select.ranking import identity_ranking, rank_attributes
from reliefrank.feature_select.relief import relieff_classification, relieff_regression

__all__ = ["relieff_classification", "relieff_regression", "rank_attributes", "identity_ranking"]
