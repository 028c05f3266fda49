"""MapReduce applications: word count, indexer and test applications."""