"""
Built-in curriculum catalog.

Each subject carries a ``language`` hint: programming subjects get coding
questions graded by the sandbox in that language; CS theory subjects are
MCQ-only.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ModuleSeed:
    order: int
    title: str
    seed_topic: str
    video_links: tuple[str, ...] = ()


@dataclass(frozen=True)
class SubjectSeed:
    key: str
    title: str
    language: str | None = None
    display_order: int = 0
    modules: tuple[ModuleSeed, ...] = field(default_factory=tuple)


def _modules(*rows: tuple) -> tuple[ModuleSeed, ...]:
    return tuple(ModuleSeed(order, *rest) for order, *rest in rows)


CPP = SubjectSeed(
    key="cpp",
    title="C++ Programming",
    language="cpp",
    display_order=1,
    modules=_modules(
        (1, "Intro to C++", "History & setup, structure of a C++ program", (
            "https://www.youtube.com/watch?v=TVXEfw6Nrjk",
            "https://www.youtube.com/watch?v=SeR2aDYoJAI",
        )),
        (2, "Variables & Types", "Primitive types, variables, constants in C++", (
            "https://www.youtube.com/watch?v=pJTZTHMDuB0",
        )),
        (3, "Control Flow", "if/else, loops, switch statements in C++", (
            "https://www.youtube.com/watch?v=PnV4e9lbiM4",
        )),
        (4, "Functions", "Function declaration, parameters, return values in C++", (
            "https://youtu.be/7ThRtb-EMh8",
        )),
        (5, "Pointers", "Pointers, references, and basics of memory management in C++", (
            "https://www.youtube.com/watch?v=q6_lN-CQN2s",
        )),
    ),
)

OOP = SubjectSeed(
    key="oop",
    title="Object-Oriented Programming",
    language="cpp",
    display_order=2,
    modules=_modules(
        (1, "Core OOP Concepts",
         "Introduction to Encapsulation, Abstraction, Inheritance, and Polymorphism", (
             "https://www.youtube.com/watch?v=pTB0EiLXUC8",
         )),
        (2, "Classes and Objects",
         "Defining classes, creating objects, constructors, and destructors"),
        (3, "Inheritance", "Types of inheritance, base and derived classes, access control"),
        (4, "Polymorphism",
         "Function overloading, virtual functions, and runtime polymorphism"),
    ),
)

DSA = SubjectSeed(
    key="dsa",
    title="Data Structures & Algorithms",
    language="cpp",
    display_order=3,
    modules=_modules(
        (1, "Algorithm Analysis",
         "Asymptotic notations (Big O, Big Omega, Big Theta), time and space complexity analysis, "
         "recurrence relations"),
        (2, "Arrays",
         "Basic operations, dynamic arrays, multi-dimensional arrays, common array-based problems"),
        (3, "Linked Lists",
         "Singly linked lists, doubly linked lists, circular linked lists, operations "
         "(insertion, deletion, traversal), applications"),
        (4, "Stacks",
         "LIFO principle, operations (push, pop, peek), implementation (array, linked list), "
         "applications (expression evaluation, recursion)"),
        (5, "Queues",
         "FIFO principle, operations (enqueue, dequeue), implementation (array, linked list), "
         "Circular Queues, Priority Queues, Deques"),
        (6, "Trees - Basics",
         "Tree terminology, Binary Trees, Binary Search Trees (BST), operations "
         "(insertion, deletion, search), traversals (inorder, preorder, postorder)"),
        (7, "Trees - Advanced", "AVL Trees, Red-Black Trees, B-Trees, Heaps (Min-Heap, Max-Heap), Heap Sort"),
        (8, "Hashing",
         "Hash functions, collision resolution techniques (chaining, open addressing), applications"),
        (9, "Graphs",
         "Graph representations (adjacency matrix, adjacency list), traversals (BFS, DFS), shortest "
         "path algorithms (Dijkstra, Bellman-Ford), Minimum Spanning Trees (Prim's, Kruskal's)"),
        (10, "Searching Algorithms", "Linear Search, Binary Search (iterative and recursive)"),
        (11, "Sorting Algorithms",
         "Bubble Sort, Selection Sort, Insertion Sort, Merge Sort, Quick Sort, Heap Sort, "
         "Counting Sort, Radix Sort"),
        (12, "Greedy Algorithms",
         "Concept of greedy approach, examples (Activity Selection, Huffman Coding, Fractional Knapsack)"),
        (13, "Dynamic Programming",
         "Concept of overlapping subproblems and optimal substructure, memoization vs tabulation, "
         "examples (Fibonacci, Longest Common Subsequence, 0/1 Knapsack)"),
        (14, "Divide and Conquer",
         "Concept of divide and conquer, examples (Merge Sort, Quick Sort, Binary Search)"),
    ),
)

JAVA = SubjectSeed(
    key="java",
    title="Java Programming",
    language="java",
    display_order=4,
    modules=_modules(
        (1, "Java Basics", "JVM, JDK, JRE, basic syntax, data types, variables, operators, type casting"),
        (2, "Control Flow",
         "Conditional statements (if-else, switch), loops (for, while, do-while), break, continue"),
        (3, "Arrays & Strings",
         "Declaring, initializing arrays, multi-dimensional arrays, String class, StringBuilder, "
         "StringBuffer"),
        (4, "OOP Part 1: Classes & Objects",
         "Classes, objects, constructors, 'this' keyword, static keyword, methods"),
        (5, "OOP Part 2: Inheritance",
         "IS-A relationship, types of inheritance, 'super' keyword, method overriding, final keyword"),
        (6, "OOP Part 3: Polymorphism",
         "Method overloading, method overriding, dynamic method dispatch, abstract classes, interfaces"),
        (7, "OOP Part 4: Encapsulation & Abstraction",
         "Access modifiers (public, private, protected, default), getter and setter methods, "
         "abstract classes vs interfaces"),
        (8, "Packages & Exception Handling",
         "Creating packages, importing packages, try-catch-finally blocks, checked vs unchecked "
         "exceptions, throw, throws"),
        (9, "Multithreading",
         "Thread lifecycle, creating threads (Thread class, Runnable interface), synchronization "
         "(synchronized methods/blocks)"),
        (10, "Collections Framework",
         "List (ArrayList, LinkedList), Set (HashSet, TreeSet), Map (HashMap, TreeMap), Iterator, "
         "Generics"),
    ),
)

PYTHON = SubjectSeed(
    key="python",
    title="Python Programming",
    language="python",
    display_order=5,
    modules=_modules(
        (1, "Python Basics",
         "Syntax, indentation, variables, basic data types (int, float, bool, string), operators"),
        (2, "Data Structures", "Lists, tuples, dictionaries, sets - creation, manipulation, and methods"),
        (3, "Control Flow",
         "Conditional statements (if/elif/else), loops (for, while), break, continue, pass"),
        (4, "Functions",
         "Defining functions, arguments (positional, keyword, default, *args, **kwargs), return "
         "values, scope (LEGB rule), lambda functions"),
        (5, "Modules & Packages",
         "Importing modules, creating modules, standard library overview, pip and package management"),
        (6, "File Handling",
         "Opening, reading, writing files, different modes, context managers (with statement)"),
        (7, "Object-Oriented Programming",
         "Classes, objects, inheritance, polymorphism, encapsulation, special methods "
         "(__init__, __str__)"),
        (8, "Exception Handling", "try, except, else, finally blocks, raising exceptions"),
        (9, "Regular Expressions",
         "Using the 're' module, pattern matching, search, findall, sub"),
    ),
)

CN = SubjectSeed(
    key="cn",
    title="Computer Networks",
    display_order=6,
    modules=_modules(
        (1, "Introduction & Layering",
         "Network goals, applications, topologies, layered architecture (OSI, TCP/IP)"),
        (2, "Physical Layer",
         "Transmission media, encoding, multiplexing (FDM, TDM, WDM), switching (circuit, packet)"),
        (3, "Data Link Layer",
         "Framing, error detection (parity, CRC), error correction, flow control (Stop-and-Wait, "
         "Sliding Window), MAC protocols (ALOHA, CSMA/CD, CSMA/CA), Ethernet, ARP"),
        (4, "Network Layer - Addressing", "IPv4 addressing, subnetting, CIDR, IPv6 addressing"),
        (5, "Network Layer - Routing",
         "Routing algorithms (Distance Vector - RIP, Link State - OSPF), BGP, IP protocol, ICMP"),
        (6, "Transport Layer",
         "UDP, TCP (segment structure, connection establishment/termination - 3-way handshake, "
         "flow control, congestion control - AIMD, slow start)"),
        (7, "Application Layer", "Protocols: HTTP, HTTPS, FTP, SMTP, POP3, IMAP, DNS"),
        (8, "Network Security",
         "Cryptography basics (symmetric, asymmetric), firewalls, VPNs, common threats"),
    ),
)

DBMS = SubjectSeed(
    key="dbms",
    title="Database Management Systems",
    display_order=7,
    modules=_modules(
        (1, "Introduction & ER Model",
         "DBMS concepts, advantages, data models, ER diagrams (entities, attributes, relationships), "
         "constraints"),
        (2, "Relational Model",
         "Relational algebra (select, project, join, union, intersection, difference), tuple "
         "relational calculus, domain relational calculus"),
        (3, "SQL - Basic Queries",
         "DDL (CREATE, ALTER, DROP), DML (SELECT, INSERT, UPDATE, DELETE), basic SELECT queries "
         "(WHERE, ORDER BY, DISTINCT)"),
        (4, "SQL - Advanced Queries",
         "Aggregate functions (COUNT, SUM, AVG, MIN, MAX), GROUP BY, HAVING, Joins (INNER, LEFT, "
         "RIGHT, FULL), Subqueries, Views"),
        (5, "Database Design & Normalization",
         "Functional dependencies, Armstrong's axioms, Normal forms (1NF, 2NF, 3NF, BCNF), "
         "decomposition properties (lossless join, dependency preserving)"),
        (6, "File Organization & Indexing",
         "File organization methods (heap, sequential, indexed), Indexing structures (B-trees, B+ trees)"),
        (7, "Transaction Management",
         "ACID properties, transaction states, schedules (serializable, recoverable), concurrency "
         "control protocols (lock-based, timestamp-based)"),
        (8, "Recovery System",
         "Failure classification, log-based recovery, checkpointing, shadow paging"),
    ),
)

OS = SubjectSeed(
    key="os",
    title="Operating Systems",
    display_order=8,
    modules=_modules(
        (1, "Introduction to OS",
         "OS functions, structure, types (batch, time-sharing, real-time), system calls, kernel vs "
         "user mode"),
        (2, "Process Management",
         "Process concept, process states, PCB, process scheduling queues, context switching, "
         "inter-process communication (IPC)"),
        (3, "CPU Scheduling",
         "Scheduling criteria, algorithms (FCFS, SJF, SRTF, Priority, Round Robin, Multilevel Queue)"),
        (4, "Threads", "Thread concept, user vs kernel threads, multithreading models"),
        (5, "Process Synchronization",
         "Critical section problem, Peterson's solution, hardware support, semaphores, monitors, "
         "classic synchronization problems (Bounded Buffer, Readers-Writers)"),
        (6, "Deadlocks",
         "Deadlock conditions, handling methods (prevention, avoidance - Banker's algorithm, "
         "detection, recovery)"),
        (7, "Memory Management",
         "Logical vs physical address space, swapping, contiguous allocation, paging (segmentation "
         "vs paging), virtual memory, demand paging, page replacement algorithms (FIFO, Optimal, LRU)"),
        (8, "File Systems",
         "File concept, access methods, directory structure, allocation methods (contiguous, linked, "
         "indexed), free space management"),
        (9, "Disk Scheduling",
         "Disk structure, scheduling algorithms (FCFS, SSTF, SCAN, C-SCAN, LOOK, C-LOOK)"),
    ),
)

DEFAULT_CATALOG: tuple[SubjectSeed, ...] = (CPP, OOP, DSA, JAVA, PYTHON, CN, DBMS, OS)
