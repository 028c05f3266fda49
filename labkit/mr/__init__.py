"""MapReduce master, worker, application lookup and the messages they exchange."""