#Lifecycle transitions the partner drives after assignment (accept / reject / advance)
#and partner availability toggles. Pure functions over domain models.
