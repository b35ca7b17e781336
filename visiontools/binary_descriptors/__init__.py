"""BRIEF binary patch descriptors and their matching by Hamming distance."""