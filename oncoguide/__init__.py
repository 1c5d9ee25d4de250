# OncoGuide: patient Q&A over a cancer-care corpus.
